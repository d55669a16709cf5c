"""
Canned responses stored when the model reports capacity exhaustion
"""
import copy
from typing import Any, Dict

CHAT_FALLBACK_MESSAGE = (
    "⚠️ AI service temporarily unavailable. The navigator system is experiencing high demand. "
    "Please try again in a moment.\n\n"
    "In the meantime, I can still help you organize your thoughts and plans through this interface."
)

_MANUAL_RISK = {"level": "Medium", "description": "Manual analysis recommended"}

_FALLBACK_ANALYSIS = {
    "summary": "AI analysis temporarily unavailable due to high system demand. Please try again shortly.",
    "factors": [
        {
            "name": "Cost",
            "optionAScore": 5,
            "optionBScore": 5,
            "weight": 8,
            "reasoning": "Consider financial implications of both options",
        },
        {
            "name": "Time Investment",
            "optionAScore": 5,
            "optionBScore": 5,
            "weight": 7,
            "reasoning": "Evaluate time requirements for each choice",
        },
    ],
    "riskAssessment": {
        "optionA": _MANUAL_RISK,
        "optionB": _MANUAL_RISK,
    },
    "recommendation": (
        "AI analysis is currently unavailable. Consider creating a pros/cons list "
        "and consulting with trusted advisors."
    ),
    "confidence": 3,
}


def fallback_analysis() -> Dict[str, Any]:
    """Fresh copy of the canned analysis; identical for every input"""
    return copy.deepcopy(_FALLBACK_ANALYSIS)
