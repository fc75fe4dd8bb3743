"""Client-side chat state: the turn list and the input box."""

from typing import List, Optional

from visionchat.gateway_client import GatewayClient
from visionchat.models import ChatTurn

GREETING = "Hello! I am VisionChat AI. How can I help you today?"


class ChatSession:
    def __init__(self, client: Optional[GatewayClient] = None):
        self.client = client or GatewayClient()
        self.turns: List[ChatTurn] = [ChatTurn(text=GREETING, sender="ai")]
        self.input_text = ""
        self.selected_image: Optional[str] = None
        self.is_loading = False

    def set_input(self, text: str):
        self.input_text = text

    def select_image(self, data_uri: str):
        self.selected_image = data_uri

    def clear_image(self):
        self.selected_image = None

    def _append(self, turn: ChatTurn) -> ChatTurn:
        self.turns.append(turn)
        return turn

    async def send(self) -> Optional[ChatTurn]:
        """Send the current input. Returns the AI turn, or None when there was nothing to send."""
        if not self.input_text.strip() and not self.selected_image:
            return None

        text, image = self.input_text, self.selected_image
        self._append(ChatTurn(text=text or None, image=image, sender="user"))

        self.input_text = ""
        self.selected_image = None
        self.is_loading = True
        try:
            reply = await self.client.send_turn(text, image)
        finally:
            self.is_loading = False

        return self._append(ChatTurn(text=reply, sender="ai"))
