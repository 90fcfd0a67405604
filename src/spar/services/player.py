"""Fire-and-forget playback of saved audio files."""

import asyncio
import logging
import platform
import shutil
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

class PlatformFamily(str, Enum):
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"

    @classmethod
    def detect(cls, system: Optional[str] = None) -> "PlatformFamily":
        """Resolve the family from ``platform.system()``; unknown systems use LINUX."""
        system = system or platform.system()
        if system == "Windows":
            return cls.WINDOWS
        if system == "Darwin":
            return cls.MACOS
        return cls.LINUX

class AudioPlayer(ABC):
    """Plays an audio file; failures are reported, never raised."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    @abstractmethod
    async def play(self, audio_path: Path) -> bool:
        """Play the file, returning True when playback succeeded."""
        pass

class SkippedPlayer(AudioPlayer):
    """Bypass used when SKIP_AUDIO_PLAYBACK is set."""

    async def play(self, audio_path: Path) -> bool:
        self.console.print(f"Audio playback skipped. File saved to: {escape(str(audio_path))}")
        return False

class CommandPlayer(AudioPlayer):
    """Plays audio by running an OS command and waiting for it to exit."""

    @abstractmethod
    def build_command(self, audio_path: Path) -> List[str]:
        """Command line that plays the file."""
        pass

    async def play(self, audio_path: Path) -> bool:
        if not audio_path.exists():
            self.console.print(f"[red]Audio file not found: {escape(str(audio_path))}")
            return False

        cmd = self.build_command(audio_path)
        logger.debug(f"Playing audio with: {' '.join(cmd)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            _, stderr = await process.communicate()
        except Exception as e:
            logger.error(f"Error playing audio {audio_path}: {e}")
            self.console.print(f"Error playing audio: {escape(str(e))}, file saved to: {escape(str(audio_path))}")
            return False

        if process.returncode != 0:
            logger.warning(
                f"Player exited with {process.returncode}: "
                f"{stderr.decode(errors='replace').strip() if stderr else ''}"
            )
            self.console.print(f"Could not play audio. File saved to: {escape(str(audio_path))}")
            return False
        return True

class WindowsPlayer(CommandPlayer):
    def build_command(self, audio_path: Path) -> List[str]:
        # start is a cmd builtin; the empty string is the window title
        return ["cmd", "/c", "start", "", str(audio_path)]

class MacPlayer(CommandPlayer):
    def build_command(self, audio_path: Path) -> List[str]:
        return ["afplay", str(audio_path)]

class LinuxPlayer(CommandPlayer):
    def build_command(self, audio_path: Path) -> List[str]:
        mpg123 = shutil.which("mpg123") or "/usr/bin/mpg123"
        return [mpg123, "-q", str(audio_path)]

PLAYER_MAP = {
    PlatformFamily.WINDOWS: WindowsPlayer,
    PlatformFamily.MACOS: MacPlayer,
    PlatformFamily.LINUX: LinuxPlayer
}

def create_player(
    skip: bool = False,
    family: Optional[PlatformFamily] = None,
    console: Optional[Console] = None
) -> AudioPlayer:
    """Pick the player for this platform, once, at startup."""
    if skip:
        return SkippedPlayer(console)
    family = family or PlatformFamily.detect()
    logger.info(f"Using {family.value} audio player")
    return PLAYER_MAP[family](console)
