from typing import Protocol


class IGuestNotifier(Protocol):
    async def send_guest_confirmation(
        self, *, contact: str, template_id: str, params: list[str]
    ) -> bool:
        """
        Send a templated message to the guest

        Args:
            contact: Guest phone number as entered by staff
            template_id: Gateway template identifier
            params: Positional template parameters

        Returns:
            True when the gateway accepted the message, False otherwise (never raises)
        """
        ...
