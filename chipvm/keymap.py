"""Physical keyboard layout for the 16-key CHIP-8 keypad.

    1 2 3 C        1 2 3 4
    4 5 6 D   <-   Q W E R
    7 8 9 E        A S D F
    A 0 B F        Z X C V
"""

KEY_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def build_key_map(key_code) -> dict:
    """Resolve the layout into ``{backend_key_code: keypad_code}``.

    ``key_code`` turns a key name into the backend's code, e.g.
    ``pygame.key.key_code``.
    """
    return {key_code(name): code for name, code in KEY_LAYOUT.items()}
