# src/auditor/services/classifier_service.py
from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, Iterable, List, Optional

from openai import AzureOpenAI, OpenAIError
from pydantic import ValidationError
from tqdm.auto import tqdm

from copydeck.core.managers.config_manager import config_manager
from scraper.model import Analysis, ContentItem

logger = logging.getLogger(__name__)

CATEGORIES = (
    "button, heading, body-text, tooltip, empty-state, error-message, "
    "label, placeholder, navigation, or other"
)

_FENCE = re.compile(r"```(?:json)?\s*|```")


def strip_code_fences(text: str) -> str:
    """Removes markdown code fences the model sometimes wraps around JSON."""
    return _FENCE.sub("", text or "").strip()


class ContentClassifierService:
    """
    Azure OpenAI backed classifier for UI copy (category, tone, purpose).

    Calls are made one item at a time with a short courtesy delay. Failures are
    never raised: the item simply stays unanalyzed and the batch continues.
    """

    def __init__(
            self,
            client: Any,
            deployment: str,
            system_prompt: Optional[str] = None,
            temperature: float = 0.3,
            max_tokens: int = 500,
            delay_seconds: float = 0.1,
            patterns_max_chars: int = 4000,
    ):
        self.client = client
        self.deployment = deployment
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.delay_seconds = delay_seconds
        self.patterns_max_chars = patterns_max_chars

    @classmethod
    def from_environment(cls) -> Optional["ContentClassifierService"]:
        """
        Builds the service from AZURE_OPENAI_* variables and the 'classifier'
        config section. Returns None when the classifier is disabled or not configured.
        """
        if not config_manager.get_nested("classifier.enabled", True):
            return None

        endpoint = config_manager.get_env("AZURE_OPENAI_ENDPOINT")
        api_key = config_manager.get_env("AZURE_OPENAI_API_KEY")
        deployment = config_manager.get_env("AZURE_OPENAI_DEPLOYMENT")
        if not (endpoint and api_key and deployment):
            logger.info("Azure OpenAI is not configured; content stays unanalyzed.")
            return None

        api_version = config_manager.get_env(
            "AZURE_OPENAI_API_VERSION",
            config_manager.get_nested("classifier.api_version", "2024-02-15-preview"),
        )
        client = AzureOpenAI(azure_endpoint=endpoint, api_key=api_key, api_version=api_version)
        return cls(
            client=client,
            deployment=deployment,
            system_prompt=config_manager.get_env("AI_SYSTEM_PROMPT"),
            temperature=float(config_manager.get_nested("classifier.temperature", 0.3)),
            max_tokens=int(config_manager.get_nested("classifier.max_tokens", 500)),
            delay_seconds=float(config_manager.get_nested("classifier.delay_seconds", 0.1)),
            patterns_max_chars=int(config_manager.get_nested("classifier.patterns_max_chars", 4000)),
        )

    # --- Prompting ---

    def _messages(self, prompt: str) -> List[Dict[str, str]]:
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _complete_json(self, prompt: str, temperature: float, max_tokens: int) -> Dict[str, Any]:
        response = self.client.chat.completions.create(
            model=self.deployment,
            messages=self._messages(prompt),
            temperature=temperature,
            max_tokens=max_tokens,
        )
        content = strip_code_fences(response.choices[0].message.content or "")
        data = json.loads(content)
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object")
        return data

    @staticmethod
    def _item_prompt(item: ContentItem) -> str:
        location = item.attributes.get("path") or item.identity
        return (
            "Analyze this UI content item and categorize it:\n\n"
            f"Name: {item.attributes.get('name') or item.tag}\n"
            f"Type: {item.tag}\n"
            f"Location: {location}\n"
            f"Content: {json.dumps(item.original_text, ensure_ascii=False)}\n\n"
            f"Categorize as one of: {CATEGORIES}.\n"
            "Also identify: tone (formal/casual/friendly/mixed), purpose, and any UX patterns.\n\n"
            "Respond in JSON format:\n"
            '{"category": "...", "tone": "...", "purpose": "...", "patterns": ["..."]}'
        )

    # --- Public API ---

    def classify(self, item: ContentItem) -> Optional[Analysis]:
        """Classifies one item. Returns None on any failure (never retried within a run)."""
        try:
            data = self._complete_json(self._item_prompt(item), self.temperature, self.max_tokens)
            return Analysis(**data)
        except (OpenAIError, json.JSONDecodeError, ValueError, ValidationError, IndexError, AttributeError) as e:
            logger.warning("Error analyzing item %s: %s", item.id, e)
            return None

    def classify_all(self, items: Iterable[ContentItem], show_progress: bool = True) -> List[ContentItem]:
        """
        Classifies items sequentially, preserving order. Unanalyzable items are
        kept without analysis.
        """
        items = list(items)
        analyzed: List[ContentItem] = []
        iterator = tqdm(items, desc="Analyzing content", unit="item", leave=False) if show_progress else items
        failures = 0

        for index, item in enumerate(iterator):
            analysis = self.classify(item)
            if analysis is None:
                failures += 1
            analyzed.append(item.with_analysis(analysis))

            # Rate limiting courtesy towards the API
            if self.delay_seconds and index < len(items) - 1:
                time.sleep(self.delay_seconds)

        if failures:
            logger.warning("%d of %d items could not be analyzed.", failures, len(items))
        return analyzed

    def find_patterns(self, items: Iterable[ContentItem]) -> Optional[Dict[str, Any]]:
        """Asks for content-wide insights (phrases, tone issues, naming, recommendations)."""
        all_text = "\n".join(item.original_text for item in items)
        if not all_text:
            return None

        prompt = (
            "Analyze these UI text strings and identify:\n"
            "1. Common phrases or patterns\n"
            "2. Tone consistency issues\n"
            "3. Naming conventions\n"
            "4. Potential improvements\n\n"
            f"Text strings:\n{all_text[:self.patterns_max_chars]}\n\n"
            "Provide actionable insights in JSON:\n"
            '{"commonPhrases": ["..."], "toneIssues": ["..."], '
            '"namingPatterns": ["..."], "recommendations": ["..."]}'
        )
        try:
            return self._complete_json(prompt, temperature=0.5, max_tokens=1000)
        except (OpenAIError, json.JSONDecodeError, ValueError, IndexError, AttributeError) as e:
            logger.warning("Error finding patterns: %s", e)
            return None
