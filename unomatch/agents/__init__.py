"""Built-in policies."""

from unomatch.agents.first_fit import FirstFitPolicy, choose_move, pick_color
from unomatch.agents.human_agent import HumanAgent
from unomatch.agents.llm_agent import LLMAgent

__all__ = ["FirstFitPolicy", "choose_move", "pick_color", "HumanAgent", "LLMAgent"]
