from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class SsmlGender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    NEUTRAL = "neutral"

class VoiceProfile(BaseModel):
    """Speech synthesis parameters for one persona."""
    model_config = ConfigDict(frozen=True)

    language_code: str = "en-US"
    name: str
    gender: SsmlGender = SsmlGender.NEUTRAL
    pitch: float = Field(default=0.0, ge=-20.0, le=20.0, description="Pitch offset in semitones")
    speaking_rate: float = Field(default=1.0, ge=0.25, le=4.0, description="1.0 is normal speed")
    volume_gain_db: float = Field(default=0.0, ge=-96.0, le=16.0)

class Persona(BaseModel):
    """One of the two participants in the argument."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    system_instruction: str
    voice: VoiceProfile
    model: Optional[str] = Field(
        default=None,
        description="Completion model for this persona; the configured default when unset"
    )
