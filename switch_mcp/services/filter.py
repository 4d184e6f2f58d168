"""Strip shell noise from raw switch output.

This is a best-effort heuristic over free-form terminal text, not a
parser. The first line echoing the issued command marks where the
result starts; everything before it (login banner, leftover prompts) is
dropped. When the echo cannot be found the raw output is returned as is.
"""

import logging

logger = logging.getLogger(__name__)

# Written by pagers to erase the "---- More ----" marker
PAGER_ERASE = " \b"


def filter_result(output: str, first_command: str) -> str:
    """Return output starting at the echo of first_command.

    Args:
        output: Accumulated shell output
        first_command: Literal text of the first command written

    Returns:
        Lines from the command echo onwards, each terminated by "\\n",
        or output unchanged if the command echo is not found
    """
    if not first_command:
        return output

    kept: list[str] = []
    found = False

    for line in output.split("\n"):
        line = line.replace(PAGER_ERASE, "")
        if found:
            kept.append(line)
            continue
        index = line.find(first_command)
        if index >= 0:
            found = True
            prompt = line[:index].replace("\r", "").strip()
            logger.debug("Find prompt='%s'", prompt)
            kept.append(line)

    if not found:
        return output

    return "".join(f"{line}\n" for line in kept)
