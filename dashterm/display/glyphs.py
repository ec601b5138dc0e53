icons = {}

_defaults = {}


def init(style: str = "compatible"):
    """
    Initializes the glyphs used by the dashboard and the terminal.

    :param style: Name of the style set. Options:
                  - 'compatible' (default)
                  - 'standard'
                  - 'nerdfont'
    """
    global icons, _defaults

    if style == "compatible":
        icons = {
            # widgets
            "todo": "[&]",
            "clock": "T",
            "done": "[x]",
            "pending": "[ ]",
            # terminal
            "terminal": "[>]",
            "track": "|",
            "thumb": "#",
        }

    elif style == "standard":
        icons = {
            "todo": "☑",
            "clock": "🕒",
            "done": "☑",
            "pending": "☐",
            "terminal": "[>]",
            "track": "│",
            "thumb": "█",
        }

    elif style == "nerdfont":
        icons = {
            "todo": "",
            "clock": "\U000f0954",
            "done": "",
            "pending": "",
            "terminal": "",
            "track": "│",
            "thumb": "┃",
        }

    else:
        raise ValueError(f"Unknown style: {style}")

    _defaults = {
        "icons": icons
    }
