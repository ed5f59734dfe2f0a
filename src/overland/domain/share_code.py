"""Reversible share codes of the form ``<MODE>-<WORD><NN>``, e.g. ``DP-ORANGE42``.

A code carries a 9-bit word index and a 2-digit number. Decoding hashes
those bits (with the mode) into a full 64-bit seed whose low 16 bits still
hold them, so encoding the seed again gives back the same code.
"""
from __future__ import annotations

from typing import Dict, Tuple

from overland.core.hashing import fnv1a64
from overland.core.numbers import U64_MASK
from overland.core.types import GameMode

SEED_PREFIX = b"DYSTR-"
SEED_SUFFIX = 0xA5
WORD_INDEX_MASK = 0x1FF
NUMBER_MASK = 0x7F
NUMBER_SHIFT = 9
MODE_LABELS: Dict[bool, str] = {True: "DP", False: "CL"}

WORD_LIST: Tuple[str, ...] = (
    "ACORN", "ADOBE", "AGATE", "ALDER", "ALFALFA", "ALMOND", "ALPACA", "AMBER",
    "ANCHOR", "ANVIL", "APPLE", "APRICOT", "ARCADE", "ARCH", "ARROW", "ASPEN",
    "ASTER", "ATLAS", "ATTIC", "AUTUMN", "AVOCADO", "AXLE", "AZURE", "BADGER",
    "BAGEL", "BALLAD", "BALSA", "BAMBOO", "BANJO", "BANNER", "BANYAN", "BARLEY",
    "BARN", "BASALT", "BASIL", "BASIN", "BATON", "BAYOU", "BEACON", "BEAGLE",
    "BEAR", "BEAVER", "BEECH", "BEET", "BEETLE", "BELL", "BERRY", "BIRCH",
    "BISON", "BLAZE", "BLOSSOM", "BLUFF", "BOBCAT", "BONFIRE", "BOOT", "BORDER",
    "BOULDER", "BOUQUET", "BRAMBLE", "BRANCH", "BREEZE", "BRICK", "BRIDGE", "BRISKET",
    "BROOK", "BUCKET", "BUCKEYE", "BUFFALO", "BUGLE", "BURLAP", "BURRO", "BUTTE",
    "BUZZARD", "CABIN", "CABOOSE", "CACTUS", "CALICO", "CAMEL", "CANAL", "CANARY",
    "CANDLE", "CANOE", "CANYON", "CAPE", "CARAMEL", "CARGO", "CARIBOU", "CARROT",
    "CASCADE", "CASHEW", "CASTLE", "CATFISH", "CATTAIL", "CAVERN", "CEDAR", "CELERY",
    "CELLAR", "CHALET", "CHAPEL", "CHEDDAR", "CHERRY", "CHIMNEY", "CHUTNEY", "CIDER",
    "CINDER", "CITRUS", "CLAM", "CLIFF", "CLIPPER", "CLOVER", "COBALT", "COBBLER",
    "COCOA", "COMET", "COMPASS", "CONDOR", "COOKIE", "COPPER", "CORAL", "CORN",
    "CORNET", "COTTON", "COUGAR", "COULEE", "COWBELL", "COYOTE", "CRANE", "CRATER",
    "CREEK", "CRICKET", "CROCUS", "CROW", "CRYSTAL", "CUMIN", "CUSTARD", "CYPRESS",
    "DAHLIA", "DAISY", "DAMSON", "DELTA", "DESERT", "DIESEL", "DINGO", "DOCK",
    "DOGWOOD", "DOLPHIN", "DONKEY", "DOVE", "DRAGON", "DRIFT", "DUNE", "DUSK",
    "EAGLE", "EASEL", "ECHO", "EGRET", "ELDER", "ELK", "ELM", "EMBER",
    "EMERALD", "ENGINE", "ESTUARY", "FALCON", "FARM", "FAWN", "FENCE", "FENNEL",
    "FERN", "FERRY", "FIDDLE", "FIELD", "FIG", "FINCH", "FIR", "FIREFLY",
    "FJORD", "FLAG", "FLAME", "FLINT", "FLUTE", "FOG", "FORD", "FOREST",
    "FORGE", "FOSSIL", "FOX", "FREIGHT", "FROST", "FUDGE", "GABLE", "GALAXY",
    "GALLEON", "GARDEN", "GARLIC", "GARNET", "GATE", "GAZEBO", "GAZELLE", "GECKO",
    "GEYSER", "GINGER", "GLACIER", "GLADE", "GOOSE", "GOPHER", "GORGE", "GRANITE",
    "GRAPE", "GRAVEL", "GRIZZLY", "GROVE", "GUITAR", "GULCH", "GULL", "GUMBO",
    "HALIBUT", "HAMLET", "HAMMOCK", "HARBOR", "HARP", "HARVEST", "HAWK", "HAYLOFT",
    "HAZEL", "HEARTH", "HEATHER", "HEDGE", "HEMLOCK", "HERON", "HICKORY", "HIGHWAY",
    "HILL", "HOLLOW", "HONEY", "HORIZON", "HORSE", "HUSKY", "IBIS", "ICICLE",
    "IGLOO", "INDIGO", "INLET", "IRIS", "IRON", "ISLAND", "IVORY", "IVY",
    "JACKAL", "JADE", "JAGUAR", "JASMINE", "JASPER", "JAVELIN", "JETTY", "JUKEBOX",
    "JUNIPER", "KALE", "KAYAK", "KELP", "KESTREL", "KETTLE", "KIWI", "KNOLL",
    "KOALA", "LAGOON", "LAKE", "LANTERN", "LARCH", "LARK", "LATTE", "LAUREL",
    "LAVA", "LEDGE", "LEMON", "LENTIL", "LEVEE", "LICHEN", "LILAC", "LILY",
    "LIME", "LINDEN", "LION", "LLAMA", "LOBSTER", "LODGE", "LOTUS", "LYNX",
    "MAGNET", "MAGPIE", "MAIZE", "MALLARD", "MANGO", "MANOR", "MAPLE", "MARBLE",
    "MARSH", "MARTEN", "MEADOW", "MELON", "MESA", "MILL", "MINNOW", "MINT",
    "MIRAGE", "MONSOON", "MOOSE", "MOSS", "MOTEL", "MOTH", "MUFFIN", "MULE",
    "MUSKRAT", "MUSTANG", "MYRTLE", "NECTAR", "NEEDLE", "NETTLE", "NEWT", "NICKEL",
    "NOMAD", "NUTMEG", "OAK", "OASIS", "OATMEAL", "OCELOT", "OCTAVE", "OLIVE",
    "ONION", "ONYX", "OPAL", "ORANGE", "ORBIT", "ORCA", "ORCHARD", "ORCHID",
    "OSPREY", "OTTER", "OWL", "OXBOW", "OYSTER", "PADDLE", "PAGODA", "PALM",
    "PANCAKE", "PANDA", "PANTHER", "PAPAYA", "PARSLEY", "PASTURE", "PEACH", "PEAK",
    "PEANUT", "PEAR", "PEBBLE", "PECAN", "PELICAN", "PEPPER", "PERCH", "PICKLE",
    "PIER", "PIKE", "PILGRIM", "PINE", "PIONEER", "PISTON", "PLAINS", "PLATEAU",
    "PLUM", "POLLEN", "PONY", "POPLAR", "POPPY", "PORCH", "PRAIRIE", "PRETZEL",
    "PRISM", "PUFFIN", "PUMPKIN", "QUAIL", "QUARRY", "QUARTZ", "QUILL", "QUILT",
    "QUINCE", "RABBIT", "RACCOON", "RADISH", "RAIL", "RAIN", "RAISIN", "RANCH",
    "RAPIDS", "RATTLER", "RAVEN", "RAVINE", "REDWOOD", "REED", "REEF", "RHUBARB",
    "RIDGE", "RIVER", "ROBIN", "ROCKET", "RODEO", "ROOSTER", "ROSE", "ROUNDUP",
    "ROVER", "RUBY", "RUDDER", "RUSSET", "RYE", "SADDLE", "SAFFRON", "SAGE",
    "SALMON", "SALT", "SANDBAR", "SAPLING", "SARDINE", "SATCHEL", "SAVANNA", "SCONE",
    "SEAL", "SEQUOIA", "SHALE", "SHORE", "SIERRA", "SILO", "SILVER", "SKUNK",
    "SLATE", "SLOPE", "SNOW", "SORREL", "SPARROW", "SPRUCE", "SQUASH", "STAR",
    "STEEPLE", "STONE", "STORK", "STREAM", "SUMAC", "SUMMIT", "SUNSET", "SWALLOW",
    "SWAMP", "SWAN", "TACO", "TAFFY", "TAMALE", "TANGO", "TAPIR", "TEAL",
    "THICKET", "THISTLE", "THUNDER", "THYME", "TIDE", "TIGER", "TIMBER", "TOAD",
    "TOFFEE", "TOMATO", "TOPAZ", "TORRENT", "TOUCAN", "TOWER", "TRAIL", "TRESTLE",
    "TROUT", "TRUCK", "TRUFFLE", "TULIP", "TUNDRA", "TUNNEL", "TURNIP", "TURTLE",
    "URCHIN", "VALLEY", "VANILLA", "VELVET", "VERANDA", "VIOLET", "VIPER", "VISTA",
    "VOLCANO", "VULTURE", "WAFFLE", "WAGON", "WALNUT", "WALRUS", "WARBLER", "WASP",
    "WATTLE", "WEASEL", "WHARF", "WHEAT", "WHISTLE", "WILLOW", "WOLF", "WOMBAT",
    "WREN", "YAK", "YARROW", "YUCCA", "ZEBRA", "ZEPHYR", "ZINC", "ZINNIA",
)
_WORD_INDEX: Dict[str, int] = {word: index for index, word in enumerate(WORD_LIST)}


class ShareCodeError(ValueError):
    """Raised when a share code cannot be parsed."""


def sanitize_word(word: str) -> str:
    return "".join(char.upper() for char in word if char.isascii() and char.isalpha())


def pack(word_index: int, number: int) -> int:
    return (word_index & WORD_INDEX_MASK) | ((number & NUMBER_MASK) << NUMBER_SHIFT)


def unpack(packed: int) -> Tuple[int, int]:
    return packed & WORD_INDEX_MASK, (packed >> NUMBER_SHIFT) & NUMBER_MASK


def compose_seed(is_deep: bool, word_index: int, number: int) -> int:
    packed = pack(word_index, number)
    buffer = SEED_PREFIX + bytes([ord("D" if is_deep else "C"), packed & 0xFF, packed >> 8, SEED_SUFFIX])
    return (fnv1a64(buffer) & 0xFFFF_FFFF_FFFF_0000) | packed


def encode_friendly(is_deep: bool, seed: int) -> str:
    word_index, number = unpack((seed & U64_MASK) & 0xFFFF)
    word = WORD_LIST[word_index]
    return f"{MODE_LABELS[is_deep]}-{word}{number % 100:02d}"


def decode_to_seed(code: str) -> Tuple[bool, int] | None:
    """Return ``(is_deep, seed)`` for a well-formed code, otherwise None."""
    mode, separator, rest = code.strip().partition("-")
    if not separator:
        return None
    mode = mode.upper()
    if mode not in ("CL", "DP") or len(rest) < 3:
        return None
    word_part, number_part = rest[:-2], rest[-2:]
    if not (number_part.isascii() and number_part.isdigit()):
        return None
    word_index = _WORD_INDEX.get(sanitize_word(word_part))
    if word_index is None:
        return None
    is_deep = mode == "DP"
    return is_deep, compose_seed(is_deep, word_index, int(number_part))


def generate_code_from_entropy(is_deep: bool, entropy: int) -> str:
    entropy &= U64_MASK
    word_index = entropy % len(WORD_LIST)
    number = (entropy >> 17) % 100
    return encode_friendly(is_deep, compose_seed(is_deep, word_index, number))


def parse_share_code(code: str) -> Tuple[GameMode, int]:
    """Parse a share code into its game mode and seed.

    Raises ShareCodeError when the code is malformed or uses an unknown word.
    """
    decoded = decode_to_seed(code)
    if decoded is None:
        raise ShareCodeError(f"Invalid share code '{code}'.")
    is_deep, seed = decoded
    return ("deep" if is_deep else "classic"), seed


__all__ = [
    "ShareCodeError",
    "WORD_LIST",
    "compose_seed",
    "decode_to_seed",
    "encode_friendly",
    "generate_code_from_entropy",
    "pack",
    "parse_share_code",
    "unpack",
]
