from typing import NamedTuple

from scoresim.core.types import PlayerName


class PlayerPalette(NamedTuple):
    primary: str


PLAYER_PALETTES: dict[PlayerName, PlayerPalette] = {
    "Alpha": PlayerPalette("#3b82f6"),  # Blue
    "Beta": PlayerPalette("#10b981"),  # Emerald
    "Gamma": PlayerPalette("#a855f7"),  # Purple
    "Delta": PlayerPalette("#f97316"),  # Orange
}


FALLBACK_PALETTES = [
    PlayerPalette("#8A2BE2"),
    PlayerPalette("#5F9EA0"),
    PlayerPalette("#D2691E"),
]


# --- HELPER FUNCTIONS ---
def get_player_palette(name: str) -> PlayerPalette:
    if name in PLAYER_PALETTES:
        return PLAYER_PALETTES[name]
    return FALLBACK_PALETTES[sum(map(ord, name)) % len(FALLBACK_PALETTES)]


def get_player_color(name: str) -> str:
    return get_player_palette(name).primary
