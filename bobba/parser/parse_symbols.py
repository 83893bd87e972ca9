# Credits: Bobba Research Team - 2026

# Build the asset id -> file name table from the SymbolClass tags of a bundle.
# Declarations can appear anywhere in the stream (and more than once), so the
# whole tag list is scanned before any asset gets resolved.
import logging

from bobba.external_knowledge import symbol_name_separator
from bobba.parser.parse_tags import SymbolClassDeclaration

logger = logging.getLogger()


class SymbolTableError(Exception):
    pass


class NameTooShort(SymbolTableError):
    def __init__(self, asset_id: int, qualified_name: str, prefix_length: int):
        super().__init__(asset_id, qualified_name, prefix_length)
        self.asset_id = asset_id
        self.qualified_name = qualified_name
        self.prefix_length = prefix_length

    def __str__(self):
        return (f"Symbol name {self.qualified_name!r} of asset {self.asset_id} "
                f"is shorter than the {self.prefix_length} character bundle prefix")


def trim_symbol_name(qualified_name: str, base_name: str, asset_id: int = 0) -> str:
    # "<base_name>_door" -> "door", the prefix is dropped by length only
    prefix_length = len(base_name) + len(symbol_name_separator)
    if len(qualified_name) < prefix_length:
        raise NameTooShort(asset_id, qualified_name, prefix_length)
    return qualified_name[prefix_length:]


def build_symbol_table(tags, base_name: str) -> dict:
    symbols = {}
    for tag in tags:
        if not isinstance(tag, SymbolClassDeclaration):
            continue

        for asset_id, qualified_name in tag.entries:
            trimmed_name = trim_symbol_name(qualified_name, base_name, asset_id)
            if asset_id in symbols:
                # The same id may be declared again, the first name is kept
                logger.debug("Ignoring duplicate symbol %s for asset %i (already %s)", qualified_name, asset_id, symbols[asset_id])
                continue

            symbols[asset_id] = trimmed_name
            logger.debug("Detected file name %s at idx %i for bundle %s", qualified_name, asset_id, base_name)

    return symbols
