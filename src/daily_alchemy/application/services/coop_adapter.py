"""Co-op play: shares discoveries with a partner over an ICoopBus."""

import asyncio
from typing import Callable, Optional, Tuple

from daily_alchemy.application.interfaces import ICoopBus, ILoggingService
from daily_alchemy.domain.models import (
    CoopMessage,
    CoopMessageKind,
    Element,
    ElementCatalog,
    ElementSource,
    PartnerStatus,
    ProgressLedger,
)
from daily_alchemy.domain.models.element import DEFAULT_EMOJI

from .signal_bus import GameSignal, SignalBus


class LocalCoopBus(ICoopBus):
    """In-process bus; `pair()` returns two connected ends."""

    def __init__(self):
        self._inbox: "asyncio.Queue[Optional[CoopMessage]]" = asyncio.Queue()
        self._peer: Optional["LocalCoopBus"] = None
        self.closed = False

    @classmethod
    def pair(cls) -> Tuple["LocalCoopBus", "LocalCoopBus"]:
        left, right = cls(), cls()
        left._peer, right._peer = right, left
        return left, right

    async def send(self, message: CoopMessage) -> None:
        if self.closed or self._peer is None or self._peer.closed:
            raise ConnectionError("Co-op bus is closed")
        await self._peer._inbox.put(message)

    async def recv(self) -> Optional[CoopMessage]:
        if self.closed and self._inbox.empty():
            return None
        return await self._inbox.get()

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self._inbox.put(None)
        if self._peer is not None and not self._peer.closed:
            await self._peer._inbox.put(CoopMessage(CoopMessageKind.SESSION_ENDED))


class CoopAdapter:
    """
    Bridges the local game and a co-op partner.

    Partner elements join the catalog as new discoveries but never earn
    first-discovery credit. Losing the partner never cancels the local
    game; it only flips `partner_status` and declines any pending
    "continue together?" offer.
    """

    def __init__(
        self,
        bus: ICoopBus,
        catalog: ElementCatalog,
        ledger: ProgressLedger,
        signals: SignalBus,
        logging_service: ILoggingService,
        sender_id: Optional[str] = None,
        continue_timeout: float = 30.0,
    ):
        self.bus = bus
        self.catalog = catalog
        self.ledger = ledger
        self.signals = signals
        self.logger = logging_service
        self.sender_id = sender_id
        self.continue_timeout = continue_timeout

        self.partner_status = PartnerStatus.CONNECTED
        self.partner_completed = False
        self.partner_offer_pending = False

        # Called with the Element after a partner discovery lands in the catalog
        self.on_partner_element: Optional[Callable[[Element], None]] = None

        self._continue_waiter: Optional[asyncio.Future] = None
        self._recv_task: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self.partner_status == PartnerStatus.CONNECTED

    # Lifecycle

    def start(self) -> None:
        """Start consuming partner messages on the running loop."""
        if self._recv_task is None:
            self._recv_task = asyncio.get_running_loop().create_task(self._recv_loop())

    async def stop(self) -> None:
        """Leave the session and close the local end of the bus."""
        if self.is_connected:
            await self._send(CoopMessage(CoopMessageKind.SESSION_ENDED, sender_id=self.sender_id))
        await self.bus.close()
        if self._recv_task is not None:
            self._recv_task.cancel()
            try:
                await self._recv_task
            except asyncio.CancelledError:
                pass
            self._recv_task = None
        self._resolve_continue(False)

    async def _recv_loop(self) -> None:
        while True:
            message = await self.bus.recv()
            if message is None:
                self._mark_disconnected()
                return
            self.handle_message(message)

    # Inbound

    def handle_message(self, message: CoopMessage) -> None:
        kind = message.kind
        payload = message.payload
        self.logger.debug(f"📨 Co-op message {kind.value} {payload}")

        if kind == CoopMessageKind.ELEMENT:
            self.add_partner_element(payload.get("name", ""), payload.get("emoji", ""))
        elif kind == CoopMessageKind.COMPLETION:
            self.partner_completed = True
        elif kind == CoopMessageKind.PARTNER_STATUS:
            if payload.get("status") == PartnerStatus.DISCONNECTED.value:
                self._mark_disconnected()
            else:
                self.partner_status = PartnerStatus.CONNECTED
                self.signals.emit(GameSignal.PARTNER_STATUS, {"status": PartnerStatus.CONNECTED.value})
        elif kind == CoopMessageKind.CONTINUE_OFFER:
            self.partner_offer_pending = True
            self.signals.emit(GameSignal.CONTINUE_OFFER, {})
        elif kind == CoopMessageKind.CONTINUE_RESPONSE:
            self._resolve_continue(bool(payload.get("accept")))
        elif kind == CoopMessageKind.SESSION_ENDED:
            self._mark_disconnected()

    def add_partner_element(self, name: str, emoji: str) -> bool:
        """Add a partner's discovery. Returns False if it was already known."""
        if not name or not name.strip() or self.catalog.contains(name):
            return False

        element = Element(name=name.strip(), emoji=emoji or DEFAULT_EMOJI, source=ElementSource.PARTNER)
        self.catalog.add(element)
        self.ledger.record_new_discovery(element.name)
        self.logger.info(f"🤝 Partner discovered {element.display_name}")
        self.signals.emit(GameSignal.PARTNER_ELEMENT, {"element": element.name, "emoji": element.emoji})

        if self.on_partner_element is not None:
            self.on_partner_element(element)
        return True

    def _mark_disconnected(self) -> None:
        if self.partner_status == PartnerStatus.DISCONNECTED:
            return
        self.partner_status = PartnerStatus.DISCONNECTED
        self.partner_offer_pending = False
        self.logger.warning("⚠️ Co-op partner disconnected")
        self.signals.emit(GameSignal.PARTNER_STATUS, {"status": PartnerStatus.DISCONNECTED.value})
        self._resolve_continue(False)

    # Outbound

    async def _send(self, message: CoopMessage) -> bool:
        try:
            await self.bus.send(message)
            return True
        except ConnectionError as e:
            self.logger.warning(f"⚠️ Co-op send failed ({message.kind.value}): {e}")
            self._mark_disconnected()
            return False

    async def emit_element(self, name: str, emoji: str, is_first_discovery: bool = False) -> bool:
        return await self._send(CoopMessage.element(name, emoji, is_first_discovery, self.sender_id))

    async def emit_completion(self, target: str) -> bool:
        return await self._send(CoopMessage.completion(target, self.sender_id))

    # Post-win "continue together?"

    async def offer_continue(self) -> bool:
        """
        Ask the partner to keep playing together.

        Resolves False on decline, on partner disconnection and after
        `continue_timeout` seconds without an answer.
        """
        if not self.is_connected:
            return False

        loop = asyncio.get_running_loop()
        self._continue_waiter = loop.create_future()
        if not await self._send(CoopMessage.continue_offer(self.sender_id)):
            return False

        try:
            accepted = await asyncio.wait_for(self._continue_waiter, timeout=self.continue_timeout)
        except asyncio.TimeoutError:
            self.logger.info("⌛ Continue offer timed out")
            accepted = False
        finally:
            self._continue_waiter = None

        self.signals.emit(GameSignal.CONTINUE_RESOLVED, {"accepted": accepted})
        return accepted

    async def respond_continue(self, accept: bool) -> bool:
        """Answer a partner's continue offer."""
        if not self.partner_offer_pending:
            return False
        self.partner_offer_pending = False
        return await self._send(CoopMessage.continue_response(accept, self.sender_id))

    def _resolve_continue(self, accepted: bool) -> None:
        waiter = self._continue_waiter
        if waiter is not None and not waiter.done():
            waiter.set_result(accepted)

    def get_coop_summary(self) -> dict:
        """Get summary of co-op state for logging/debugging."""
        return {
            "partner_status": self.partner_status.value,
            "partner_completed": self.partner_completed,
            "offer_pending": self.partner_offer_pending,
        }
