"""Motivational copy used by the coaching selector and the quote endpoint."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from lifecoach.core.enums import EnergyLevel, Priority, SessionType

QUOTE_BANK: Dict[str, List[str]] = {
    "low_energy": [
        "Gentle steps forward are still progress. Honor where you are.",
        "Rest is also a practice. Sometimes the best activity is to pause.",
        "What would it feel like to honor your current energy level?",
    ],
    "high_priority": [
        "What matters most deserves your attention. Start with intention.",
        "Prioritizing what's important is an act of self-care.",
        "Focus on what truly matters, one step at a time.",
    ],
    "low_priority": [
        "Luxury tasks are valid too. What brings you joy today?",
        "Not everything needs to be urgent. What would feel good?",
        "Sometimes the best use of time is doing something you love.",
    ],
    "general": [
        "Each moment is a choice. What feels right for you now?",
        "Listen to what your body and mind are telling you.",
        "There's no perfect way to spend your time. Trust your intuition.",
    ],
}

REST_QUOTE = QUOTE_BANK["low_energy"][1]
GENERAL_QUOTE = QUOTE_BANK["general"][0]

REFLECTION_PROMPTS: Dict[Tuple[SessionType, EnergyLevel], str] = {
    (SessionType.MORNING, EnergyLevel.HIGH): "How do you want to channel this energy today?",
    (SessionType.MORNING, EnergyLevel.MEDIUM): "What would make this morning feel meaningful?",
    (SessionType.MORNING, EnergyLevel.LOW): "What gentle start would serve you best?",
    (SessionType.AFTERNOON, EnergyLevel.HIGH): "What would you like to accomplish with this afternoon?",
    (SessionType.AFTERNOON, EnergyLevel.MEDIUM): "How can you make the most of this time?",
    (SessionType.AFTERNOON, EnergyLevel.LOW): "What would feel restorative right now?",
}


def quote_for(energy_level: EnergyLevel, priority: Optional[Priority]) -> str:
    """Pick the quote for an energy level and the selected activity's priority."""
    if energy_level is EnergyLevel.LOW:
        return QUOTE_BANK["low_energy"][0]
    if priority is Priority.HIGH:
        return QUOTE_BANK["high_priority"][0]
    if priority is Priority.LOW:
        return QUOTE_BANK["low_priority"][0]
    return GENERAL_QUOTE


def reflection_prompt_for(session_type: SessionType, energy_level: EnergyLevel) -> str:
    return REFLECTION_PROMPTS[(session_type, energy_level)]
