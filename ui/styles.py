from rich.theme import Theme
from rich.style import Style
from rich.text import Text

BRAND_PURPLE = "#8E44AD"
HIGHLIGHT_GOLD = "#F1C40F"
SUCCESS_GREEN = "#27AE60"
PARTIAL_ORANGE = "#E67E22"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=BRAND_PURPLE, bold=True),
        "secondary": Style(color=HIGHLIGHT_GOLD, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "partial": Style(color=PARTIAL_ORANGE),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "option_label": Style(color=HIGHLIGHT_GOLD, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=BRAND_PURPLE, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
        "severity_minor": Style(color=HIGHLIGHT_GOLD),
        "severity_moderate": Style(color=PARTIAL_ORANGE, bold=True),
        "severity_major": Style(color=ERROR_RED, bold=True),
    }
)

FEEDBACK_COLORS = {
    "correct": SUCCESS_GREEN,
    "partial": PARTIAL_ORANGE,
    "incorrect": ERROR_RED,
    "hint": INFO_BLUE,
    "explanation": BRAND_PURPLE,
}


def get_credit_style(credit: float) -> Style:
    """Get color style based on the share of points earned."""
    if credit >= 0.8:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif credit > 0.5:
        return Style(color=PARTIAL_ORANGE)
    else:
        return Style(color=ERROR_RED)


def get_feedback_color(feedback_type: str) -> str:
    """Get the border color for a feedback type."""
    return FEEDBACK_COLORS.get(feedback_type, MUTED_GRAY)


def get_severity_style(severity: str | None) -> Style:
    """Get style for an error severity label."""
    styles = {
        "minor": Style(color=HIGHLIGHT_GOLD),
        "moderate": Style(color=PARTIAL_ORANGE, bold=True),
        "major": Style(color=ERROR_RED, bold=True),
    }
    return styles.get(severity or "", Style(color=MUTED_GRAY))


def create_welcome_banner() -> Text:
    """Create the welcome banner text."""
    banner = Text()
    banner.append("╔══════════════════════════════════════╗\n", Style(color=BRAND_PURPLE))
    banner.append(
        "║         Grammar Practice             ║\n", Style(color=HIGHLIGHT_GOLD, bold=True)
    )
    banner.append("╚══════════════════════════════════════╝", Style(color=BRAND_PURPLE))
    return banner
