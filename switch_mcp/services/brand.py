"""Switch vendor detection and pagination control."""

import logging

logger = logging.getLogger(__name__)

HUAWEI = "huawei"
H3C = "h3c"
CISCO = "cisco"

# Checked in this order, first hit wins
KNOWN_BRANDS: tuple[str, ...] = (HUAWEI, H3C, CISCO)

NO_PAGE_COMMANDS: dict[str, str] = {
    HUAWEI: "screen-length 0 temporary",
    H3C: "screen-length disable",
    CISCO: "terminal length 0",
}

# The padding lines answer a possible pager prompt so the next probe
# does not lose its first character to it.
PROBE_COMMANDS: tuple[str, ...] = (
    "dis version",
    "     ",
    "show version",
    "     ",
)


def is_known_brand(brand: str) -> bool:
    """Return True if brand is one of the supported vendors."""
    return brand in KNOWN_BRANDS


def detect_brand(output: str) -> str:
    """Identify the vendor from version output.

    Args:
        output: Raw shell output of the probe commands

    Returns:
        One of KNOWN_BRANDS, or "" when no vendor name appears
    """
    lowered = output.lower()
    for brand in KNOWN_BRANDS:
        if brand in lowered:
            logger.debug("The switch brand is <%s>", brand)
            return brand
    logger.debug("Switch brand not recognized")
    return ""


def no_page_command(brand: str) -> str | None:
    """Pagination-disable command for brand, None for unknown vendors."""
    return NO_PAGE_COMMANDS.get(brand)
