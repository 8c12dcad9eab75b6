from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from lead_qualifier.services.profiles import CustomerProfile


class GenerativeResponder(ABC):
    """Optional conversational reply generator. The dialogue policy is always the fallback."""

    @abstractmethod
    async def generate(
        self,
        message: str,
        fields: Mapping[str, Any],
        status: str,
        profile: CustomerProfile,
        history: Sequence[Mapping[str, str]],
    ) -> str:
        """
        Generate a reply for the latest message.

        Raises:
            ResponderUnavailable: on any failure or an empty reply
        """
