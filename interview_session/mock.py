"""Scripted interview model for local development and deterministic tests."""
from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from llm_gateway import Completion

MOCK_MODEL = "mock-interviewer"

SCRIPT: List[Dict[str, Any]] = [
    {
        "response": "Great! You worked at Acme Corp as a Software Engineer. When did you start and end "
        "this role? And what city was it in?",
        "extractedPosition": {"company": "Acme Corp", "title": "Software Engineer"},
        "shouldContinue": True,
    },
    {
        "response": "Perfect, I have that noted. What was one impactful project you worked on there? "
        "Include any numbers like time saved, users impacted, or revenue generated.",
        "extractedPosition": {
            "company": "Acme Corp",
            "title": "Software Engineer",
            "location": "San Francisco",
            "startDate": "2022-01",
            "endDate": "2024-01",
        },
        "shouldContinue": True,
    },
    {
        "response": "That's a strong accomplishment. What else would you like to highlight from Acme Corp?",
        "extractedBullets": [
            {
                "text": "Reduced API response latency by 40% through Redis caching and query optimization, "
                "improving user engagement metrics by 25%",
                "category": "Backend",
                "hardSkills": ["Redis", "SQL", "Performance Optimization"],
                "softSkills": ["Problem Solving"],
                "metrics": {"value": "40%", "type": "latency"},
            }
        ],
        "shouldContinue": True,
    },
    {
        "response": "Would you like to add more achievements from this role, or move on to another position?",
        "extractedBullets": [
            {
                "text": "Led migration of a legacy monolith to microservices, cutting deployment time from "
                "2 hours to 15 minutes and enabling 10x faster feature releases",
                "category": "Leadership",
                "hardSkills": ["Microservices", "Docker", "CI/CD"],
                "softSkills": ["Leadership", "Technical Communication"],
                "metrics": {"value": "10x", "type": "deployment"},
            }
        ],
        "shouldContinue": True,
    },
    {
        "response": "Is there anything else you'd like to add, or are you ready to wrap up?",
        "shouldContinue": True,
    },
    {
        "response": "Thank you! I've captured Acme Corp - Software Engineer (Jan 2022 - Jan 2024) with two "
        "achievements covering Backend and Leadership work.",
        "shouldContinue": False,
    },
]


class ScriptedInterviewModel:
    """Answers with the scripted reply matching the number of user messages so far."""

    def __init__(self, script: Sequence[Dict[str, Any]] = SCRIPT) -> None:
        if not script:
            raise ValueError("script must contain at least one reply")
        self._script = list(script)

    def __call__(self, messages: Sequence[Dict[str, str]]) -> Completion:
        turn = sum(1 for message in messages if message.get("role") == "user")
        reply = self._script[min(max(turn, 1), len(self._script)) - 1]
        return Completion(content=json.dumps(reply), model=MOCK_MODEL)


__all__ = ["MOCK_MODEL", "SCRIPT", "ScriptedInterviewModel"]
