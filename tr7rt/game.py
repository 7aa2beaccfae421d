"""Front-end tables, build directories and game data records."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Optional

from .filesystem import FileSystem, RequestPriority, UserBufferReceiver

BUILD_NAME_SIZE = 16
BUILD_DIR_SIZE = 32
INTERFACE_NAME_SIZE = 48


class InterfaceItemId(enum.IntEnum):
    NVIDIA_SCREEN = 0
    TITLE_SCREEN = 1
    LEGAL_SCREEN = 2
    MOVIE_CREDITS = 3
    OUT1_SCREEN = 4
    OUT2_SCREEN = 5
    MOVIE_EPILOGUE = 6


NUM_INTERFACE_ITEMS = len(InterfaceItemId)


class InterfaceItemType(enum.IntEnum):
    MOVIE = 0
    SCREEN = 1


class PushScreen(enum.Enum):
    """UI screen pushed when an interface item is shown."""

    NONE = "none"
    FE_LEGAL = "fe_legal"


@dataclass(frozen=True)
class InterfaceItem:
    """One step of the start-up and ending sequence of movies and screens."""

    name: str
    timeout: int
    button_timeout: int
    item_type: InterfaceItemType
    next_item: Optional[InterfaceItemId]
    fade_up_speed: float
    fade_down_speed: float
    push_screen: PushScreen = PushScreen.NONE

    def __post_init__(self) -> None:
        if len(self.name.encode("latin-1")) >= INTERFACE_NAME_SIZE:
            raise ValueError(f"interface item name too long: {self.name!r}")


INTERFACE_ITEMS: tuple[InterfaceItem, ...] = (
    InterfaceItem("nvidia", 0, 0, InterfaceItemType.MOVIE,
                  InterfaceItemId.TITLE_SCREEN, 8.0, 8.0),
    InterfaceItem("title", 0, 0, InterfaceItemType.MOVIE, None, 8.0, 8.0),
    InterfaceItem("legal", 300, 300, InterfaceItemType.SCREEN,
                  InterfaceItemId.NVIDIA_SCREEN, 16.0, 16.0, PushScreen.FE_LEGAL),
    InterfaceItem("credits", 0, 0, InterfaceItemType.MOVIE, None, 16.0, 16.0),
    InterfaceItem("theend_1", 300, 10, InterfaceItemType.SCREEN,
                  InterfaceItemId.OUT2_SCREEN, 16.0, 16.0),
    InterfaceItem("theend_2", 0, 10, InterfaceItemType.SCREEN,
                  InterfaceItemId.MOVIE_CREDITS, 16.0, 16.0),
    InterfaceItem("end", 0, 0, InterfaceItemType.MOVIE,
                  InterfaceItemId.MOVIE_CREDITS, 16.0, 16.0),
)

MAIN_STATE_PLAY = 2
MAIN_STATE_MOVIE = 3
MAIN_STATE_SCREEN = 7
FIRST_MOVIE = 2


def initial_main_state(do_main_menu: bool) -> int:
    """The main state the game starts in, depending on whether the menu runs."""
    if not do_main_menu:
        return MAIN_STATE_PLAY
    if INTERFACE_ITEMS[0].item_type == InterfaceItemType.SCREEN:
        return MAIN_STATE_SCREEN
    return MAIN_STATE_MOVIE


@dataclass
class MainTracker:
    """Top-level state of the game's main loop."""

    main_state: int = 0
    previous_state: int = 0
    movie_num: int = 0
    done: int = 0
    screen: int = 0
    attract_movie_name: Optional[str] = None
    dont_clear_save: bool = False
    check_mem_card_no_card: bool = False
    check_mem_card_full: bool = False
    check_level_complete: bool = False

    @classmethod
    def start(cls, do_main_menu: bool = True) -> "MainTracker":
        """A tracker set up as at game start."""
        tracker = cls(main_state=initial_main_state(do_main_menu))
        if do_main_menu:
            tracker.movie_num = FIRST_MOVIE
        return tracker


@dataclass(frozen=True)
class BuildConfig:
    """The active build configuration and the directories derived from it."""

    name: str
    build_dir: str = field(init=False)
    sound_dir: str = field(init=False)
    cinematic_dir: str = field(init=False)

    def __post_init__(self) -> None:
        build_dir = f"{self.name}\\"
        if len(self.name) >= BUILD_NAME_SIZE or len(build_dir) >= BUILD_DIR_SIZE:
            raise ValueError(f"build configuration name too long: {self.name!r}")
        object.__setattr__(self, "build_dir", build_dir)
        object.__setattr__(self, "sound_dir", f"{build_dir}sndstrm\\")
        object.__setattr__(self, "cinematic_dir", build_dir)

    def object_file_name(self, name: str, extension: str) -> str:
        return f"{self.build_dir}{name}.{extension}"

    def unit_file_name(self, unit: str, extension: str) -> str:
        return f"{self.build_dir}{unit}.{extension}"

    def shader_bundle_name(self) -> str:
        return self.object_file_name("shaders", "drm")


def setup_build_dir(config_name: str) -> BuildConfig:
    """Build the configuration for ``config_name``."""
    return BuildConfig(config_name)


def read_file(file_system: FileSystem, file_name: str) -> Optional[bytes]:
    """Read a whole file synchronously; None if it is empty, missing or unreadable."""
    size = file_system.get_file_size(file_name)
    if not size:
        return None
    buffer = bytearray(size)
    request = file_system.request_read(UserBufferReceiver(buffer), file_name, 0)
    if request is None:
        return None
    request.submit(RequestPriority.HIGH)
    file_system.synchronize()
    return bytes(buffer)


def _cstring(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("latin-1")


@dataclass
class PlayerInventory:
    """The player's starting inventory for a chapter."""

    loadout: int = 0
    handguns: int = 0
    heavy_weapon: int = 0
    holding_heavy_weapon: int = 0
    heavy_weapon_clip_ammo: int = 0
    heavy_weapon_bank_ammo: int = 0
    grenades: int = 0
    healthpacks: int = 0
    pad: int = 0

    _STRUCT = struct.Struct("<4b2H2bH")
    SIZE = _STRUCT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "PlayerInventory":
        if len(data) < cls.SIZE:
            raise ValueError(f"inventory needs {cls.SIZE} bytes, got {len(data)}")
        return cls(*cls._STRUCT.unpack_from(data))

    def to_bytes(self) -> bytes:
        return self._STRUCT.pack(
            self.loadout, self.handguns, self.heavy_weapon, self.holding_heavy_weapon,
            self.heavy_weapon_clip_ammo, self.heavy_weapon_bank_ammo,
            self.grenades, self.healthpacks, self.pad,
        )


@dataclass
class ChapterSpec:
    """One chapter of the game as stored in the global info bank."""

    name: str = ""
    unit: str = ""
    check_point_id: int = 0
    player_object_id: int = 0
    next_chapter_number: int = 0
    save_game_text_id: int = 0
    save_game_time_format_text_id: int = 0
    location_text_id: int = 0
    mission_text_id: int = 0
    loading_screen_id: int = 0
    total_bronze_rewards: int = 0
    total_silver_rewards: int = 0
    total_gold_rewards: int = 0
    chapter_flags: int = 0
    load_amount: int = 0
    time_trial_time_sec: int = 0
    abilities: int = 0
    attack_wave_value: int = 0
    goalpoint: int = 0
    inventory: PlayerInventory = field(default_factory=PlayerInventory)

    _STRUCT = struct.Struct("<32s16s12h5i")
    SIZE = _STRUCT.size + PlayerInventory.SIZE

    @classmethod
    def from_bytes(cls, data: bytes) -> "ChapterSpec":
        if len(data) < cls.SIZE:
            raise ValueError(f"chapter spec needs {cls.SIZE} bytes, got {len(data)}")
        name, unit, *numbers = cls._STRUCT.unpack_from(data)
        inventory = PlayerInventory.from_bytes(data[cls._STRUCT.size:cls.SIZE])
        return cls(_cstring(name), _cstring(unit), *numbers, inventory=inventory)

    def to_bytes(self) -> bytes:
        name = self.name.encode("latin-1")
        unit = self.unit.encode("latin-1")
        if len(name) >= 32 or len(unit) >= 16:
            raise ValueError("chapter name or unit too long")
        head = self._STRUCT.pack(
            name, unit,
            self.check_point_id, self.player_object_id, self.next_chapter_number,
            self.save_game_text_id, self.save_game_time_format_text_id,
            self.location_text_id, self.mission_text_id, self.loading_screen_id,
            self.total_bronze_rewards, self.total_silver_rewards,
            self.total_gold_rewards, self.chapter_flags,
            self.load_amount, self.time_trial_time_sec, self.abilities,
            self.attack_wave_value, self.goalpoint,
        )
        return head + self.inventory.to_bytes()