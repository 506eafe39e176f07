"""Action submission: encode, authenticate, send, decode, validate.

Each call is a single attempt. Validation, protocol and server errors are
raised to the caller as-is; nothing is retried or swallowed here.
"""

from nord.actions.models import Action
from nord.actions.receipts import ReceiptResult, validate_receipt
from nord.exceptions import NordError
from nord.logging import bind_action_context, get_logger
from nord.signing.signer import SessionSigner, WalletSigner, authenticate
from nord.transport.channel import ByteChannel
from nord.wire.convert import decode_receipt, encode_action

logger = get_logger(__name__)


async def submit(
    action: Action,
    signer: WalletSigner | SessionSigner,
    channel: ByteChannel,
) -> ReceiptResult:
    """Submit one action and return the typed result from its receipt.

    Args:
        action: The action to submit.
        signer: Wallet signer for session lifecycle actions, session signer
            for everything else.
        channel: Transport for the authenticated bytes.

    Returns:
        The receipt's result variant (e.g. ``OrderPlaced``).

    Raises:
        ProtocolError: Oversize or truncated frames, or a receipt whose kind
            does not match the action.
        ServerError: The receipt carries an error code.
        TypeError: ``signer`` is of the wrong category for the action.
    """
    with bind_action_context(action):
        encoded = encode_action(action)
        body = await authenticate(action, encoded, signer)

        logger.debug("action_submitting", size=len(body))
        raw = await channel.send(body)

        try:
            receipt = decode_receipt(raw)
            result = validate_receipt(action, receipt)
        except NordError as exc:
            logger.warning("action_rejected", error=str(exc))
            raise

        logger.info(
            "action_accepted",
            action_id=receipt.action_id,
            result=type(result).__name__,
        )
        return result
