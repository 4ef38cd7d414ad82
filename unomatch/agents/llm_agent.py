"""LLM-backed opponent using the OpenAI library with OpenRouter, Groq, Ollama or Hugging Face."""

import json
import logging
import os
import re
import time
from typing import Any, Optional

from openai import OpenAI

from unomatch.agents.first_fit import FirstFitPolicy
from unomatch.engine import Action, PlayerView
from unomatch.engine.rules import DrawCard

logger = logging.getLogger(__name__)

OPENROUTER_BASE = "https://openrouter.ai/api/v1"
GROQ_BASE = "https://api.groq.com/openai/v1"
OLLAMA_BASE = "http://localhost:11434/v1"
HUGGINGFACE_BASE = "https://router.huggingface.co/v1"

_PROVIDERS = {
    "openrouter": (OPENROUTER_BASE, "OPENROUTER_API_KEY"),
    "groq": (GROQ_BASE, "GROQ_API_KEY"),
    "huggingface": (HUGGINGFACE_BASE, "HUGGINGFACE_API_KEY"),
}


def _format_player_view(pv: PlayerView) -> str:
    """Format player view as text for the LLM."""
    lines = [
        "=== Your hand ===",
        " ".join(f"[{i}]{c}" for i, c in enumerate(pv.my_hand)),
        "",
        "=== Top card on discard ===",
        str(pv.top_discard) if pv.top_discard else "None",
        "",
        "=== Current color to match ===",
        pv.active_color.value.upper() if pv.active_color else "any",
        "",
        "=== Other players' card counts ===",
    ]
    for pid, count in pv.num_cards_per_player.items():
        if pid != pv.player_id:
            lines.append(f"  {pid}: {count} cards")
    lines.extend([
        "",
        "=== Pending draws you owe ===",
        str(pv.pending_draw_count),
        "",
        "=== Game History (last 10 events) ===",
    ])
    if pv.history:
        lines.extend(f"- {h}" for h in pv.history)
    else:
        lines.append("No history yet.")
    return "\n".join(lines)


def _format_legal_actions(actions: list[Action], pv: PlayerView) -> str:
    """Format legal actions as text."""
    options = []
    for i, a in enumerate(actions):
        if isinstance(a, DrawCard):
            options.append(f"{i}: DRAW")
        else:
            color = f" color={a.chosen_color.value}" if a.chosen_color else ""
            options.append(f"{i}: PLAY {pv.my_hand[a.card_index]}{color}")
    return "\n".join(options)


def _parse_action_response(response: str, actions: list[Action]) -> Action | None:
    """Parse LLM response into an Action."""
    candidates: list[int] = []

    json_match = re.search(r"(\{.*?\})", response, re.DOTALL)
    if json_match:
        for text in (json_match.group(1), json_match.group(1).replace("'", '"')):
            try:
                data = json.loads(text)
            except ValueError:
                continue
            if isinstance(data, dict) and isinstance(data.get("action_index"), int):
                candidates.append(data["action_index"])
                break

    # "action_index": N with any quoting
    match = re.search(r"[\"']?action_index[\"']?\s*:\s*(\d+)", response, re.IGNORECASE)
    if match:
        candidates.append(int(match.group(1)))

    for idx in candidates:
        if 0 <= idx < len(actions):
            return actions[idx]
        logger.debug("Index %d out of range (0-%d)", idx, len(actions) - 1)

    if "DRAW" in response.upper():
        for a in actions:
            if isinstance(a, DrawCard):
                return a
    return None


class LLMAgent:
    """Policy that asks a chat model to pick among the legal actions.

    Anything the model gets wrong falls back to the first-fit policy, which
    also makes the declare/challenge decisions.
    """

    def __init__(
        self,
        provider: str = "openrouter",
        model: str = "openai/gpt-4o-mini",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        retries: int = 3,
        fallback: Optional[FirstFitPolicy] = None,
        client: Any = None,
    ):
        if client is None:
            base_url, key = self._resolve_provider(provider, api_key)
            client = OpenAI(api_key=key, base_url=base_url)
            logger.info("[llm-%s] Initialized with provider=%s, base_url=%s", model, provider, base_url)

        self._client = client
        self._model = model
        self._provider = provider
        self._timeout = timeout
        self._retries = retries
        self._fallback = fallback or FirstFitPolicy()

    @staticmethod
    def _resolve_provider(provider: str, api_key: Optional[str]) -> tuple[str, str]:
        if provider == "ollama":
            return os.environ.get("OLLAMA_BASE_URL", OLLAMA_BASE), "ollama"
        if provider not in _PROVIDERS:
            raise ValueError(f"Unknown provider: {provider}")
        base_url, env_var = _PROVIDERS[provider]
        key = api_key or os.environ.get(env_var)
        if not key:
            raise ValueError(f"API key required for {provider}. Set {env_var} or pass api_key.")
        return base_url, key

    @property
    def name(self) -> str:
        return f"llm-{self._model}"

    def choose_move(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
    ) -> Action | None:
        if not legal_actions:
            return None

        prompt = f"""You are playing UNO.
Objective: Win by playing all your cards. Match the top discard card by color (Red, Blue, Green, Yellow) or value (0-9, Skip, Reverse, Draw Two). Wild cards can be played on anything; Wild Draw Four only when you hold no card of the current color. When you owe pending draws you may only pass them on with the same kind of draw card.

{_format_player_view(player_view)}

=== Legal actions ===
{_format_legal_actions(legal_actions, player_view)}

Respond with a JSON object containing the index of your chosen action.
Example: {{"action_index": 2}}
"""

        for attempt in range(1, self._retries + 1):
            start_time = time.time()
            try:
                resp = self._client.chat.completions.create(
                    model=self._model,
                    messages=[{"role": "user", "content": prompt}],
                    timeout=self._timeout,
                )
            except Exception as e:
                logger.warning(
                    "[%s] Error on attempt %d after %.2fs: %s: %s",
                    self.name, attempt, time.time() - start_time, type(e).__name__, e,
                )
                continue

            content = resp.choices[0].message.content or ""
            logger.debug("[%s] Received response in %.2fs", self.name, time.time() - start_time)
            action = _parse_action_response(content, legal_actions)
            if action is not None:
                return action
            logger.warning("[%s] Failed to parse action from response: %r", self.name, content)

        logger.warning("[%s] All retries failed. Falling back to %s.", self.name, self._fallback.name)
        return self._fallback.choose_move(player_view, legal_actions)

    def should_declare(self, player_view: PlayerView) -> bool:
        return self._fallback.should_declare(player_view)

    def should_challenge(self, player_view: PlayerView, target_id: str) -> bool:
        return self._fallback.should_challenge(player_view, target_id)
