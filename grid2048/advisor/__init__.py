# -*- coding: utf-8 -*-
"""
Move advisors: the contract of an external move chooser, the briefing of a language-model advisor, in-process
advisors, and the retry loop that turns proposals into moves.
"""

from .core import AdvisorExhausted, AdvisorFailure, MoveAdvisor, Proposal
from .driver import advise_move
from .local import GreedyAdvisor, RandomAdvisor, ScriptedAdvisor
from .prompt import FUNCTION_SCHEMA, SYSTEM_PROMPT, build_prompt, parse_proposal

__all__ = [
    "AdvisorExhausted",
    "AdvisorFailure",
    "FUNCTION_SCHEMA",
    "GreedyAdvisor",
    "MoveAdvisor",
    "Proposal",
    "RandomAdvisor",
    "SYSTEM_PROMPT",
    "ScriptedAdvisor",
    "advise_move",
    "build_prompt",
    "parse_proposal",
]
