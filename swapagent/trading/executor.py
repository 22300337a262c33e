"""
Swap executors for SwapAgent trading.

DryRunExecutor logs intents without touching the network.
JupiterSwapExecutor routes, signs, sends and confirms real swaps.
"""

import logging
import math
import time
from decimal import Decimal
from typing import Optional, Tuple, Union

from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction
from solders.transaction_status import TransactionConfirmationStatus

from swapagent.core.errors import (
    ConfirmationTimeoutError,
    EmptyBalanceError,
    InvalidAmountError,
    InvalidIntentError,
    NoRouteError,
    TokenAccountNotFoundError,
    TransactionFailedError,
)
from swapagent.core.utils import is_positive_number, percent_of, sol_to_lamports
from swapagent.trading.accounts import AccountResolver
from swapagent.trading.intents import (
    BuyIntent,
    ExecutionResult,
    SellIntent,
    SwapIntent,
    intent_to_dict,
)
from swapagent.trading.jupiter import SOL_MINT, JupiterClient, SwapQuote

logger = logging.getLogger(__name__)

DRY_RUN_SIGNATURE = "dry-run-signature"
DEFAULT_SLIPPAGE_BPS = 1500

_LANDED = (TransactionConfirmationStatus.Confirmed, TransactionConfirmationStatus.Finalized)


class DryRunExecutor:
    """Records intents and returns a synthetic result. No network I/O."""

    def execute(self, intent: SwapIntent) -> ExecutionResult:
        logger.info(f"Dry-run swap: {intent_to_dict(intent)}")
        final_amount = intent.token_amount if isinstance(intent, SellIntent) else None
        return ExecutionResult(signature=DRY_RUN_SIGNATURE, final_amount=final_amount)


class JupiterSwapExecutor:
    """
    Executes swaps through Jupiter and confirms them on Solana.

    State per intent:
    (sell: resolve account -> balance) -> route -> sign -> send -> confirm.
    """

    def __init__(
        self,
        rpc_client,
        wallet: Keypair,
        jupiter: Optional[JupiterClient] = None,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        priority_fee_lamports: Union[int, str] = "auto",
        account_resolver: Optional[AccountResolver] = None,
        confirm_timeout: float = 60,
        confirm_poll_interval: float = 2.0,
        send_max_attempts: int = 3,
    ):
        """
        Initialize swap executor.

        Args:
            rpc_client: solana.rpc.api.Client
            wallet: Keypair that signs and pays
            jupiter: Jupiter client
            slippage_bps: Default slippage when the intent has none
            priority_fee_lamports: Lamports, or "auto"
            account_resolver: Token account lookup (sells by percent)
            confirm_timeout: Seconds to wait for confirmation
            confirm_poll_interval: Seconds between status polls
            send_max_attempts: Sends of the same signed transaction
        """
        self.rpc_client = rpc_client
        self.wallet = wallet
        self.jupiter = jupiter or JupiterClient()
        self.slippage_bps = slippage_bps
        self.priority_fee_lamports = priority_fee_lamports
        self.account_resolver = account_resolver or AccountResolver(rpc_client)
        self.confirm_timeout = confirm_timeout
        self.confirm_poll_interval = confirm_poll_interval
        self.send_max_attempts = max(1, send_max_attempts)

    def execute(self, intent: SwapIntent) -> ExecutionResult:
        if not getattr(intent, "mint", None):
            raise InvalidIntentError("Swap intent is missing a mint")

        if isinstance(intent, BuyIntent):
            return self._execute_buy(intent)
        if isinstance(intent, SellIntent):
            return self._execute_sell(intent)
        raise InvalidIntentError(f"Unknown swap intent: {intent!r}")

    def _execute_buy(self, intent: BuyIntent) -> ExecutionResult:
        if not is_positive_number(intent.sol_amount):
            raise InvalidAmountError(f"Invalid SOL amount: {intent.sol_amount}")

        amount_in = sol_to_lamports(intent.sol_amount)
        if amount_in <= 0:
            raise InvalidAmountError(f"Invalid SOL amount: {intent.sol_amount}")

        quote, final_amount = self._get_best_route(
            SOL_MINT, intent.mint, amount_in, intent.slippage_bps
        )
        signature = self._execute_swap(quote)
        return ExecutionResult(signature=signature, final_amount=final_amount)

    def _execute_sell(self, intent: SellIntent) -> ExecutionResult:
        if intent.token_amount is not None:
            # Exact amounts are not checked against the balance; the network rejects overdrafts
            amount_in = intent.token_amount
            if isinstance(amount_in, bool) or not isinstance(amount_in, int) or amount_in <= 0:
                raise InvalidAmountError(f"Invalid token amount: {amount_in}")
        else:
            percent = intent.effective_percent
            if isinstance(percent, bool) or not isinstance(percent, (int, float, Decimal)) or not math.isfinite(percent):
                raise InvalidAmountError(f"Invalid sell percent: {percent}")
            amount_in = self._resolve_sell_amount(intent.mint, percent)

        quote, final_amount = self._get_best_route(
            intent.mint, SOL_MINT, amount_in, intent.slippage_bps
        )
        signature = self._execute_swap(quote)
        return ExecutionResult(signature=signature, final_amount=final_amount)

    def _resolve_sell_amount(self, mint: str, percent: float) -> int:
        """Base units to sell: floor(balance * percent / 100)."""
        account = self.account_resolver.find_token_account(
            self.wallet.pubkey(), Pubkey.from_string(mint)
        )
        if account is None:
            raise TokenAccountNotFoundError(mint)

        snapshot = self.account_resolver.get_token_account_snapshot(account)
        amount = percent_of(snapshot.amount, percent)
        if amount <= 0:
            raise EmptyBalanceError(mint)

        logger.info(f"Selling {amount}/{snapshot.amount} base units ({percent}%) of {mint}")
        return amount

    def _get_best_route(
        self,
        input_mint: str,
        output_mint: str,
        amount_in: int,
        slippage_bps: Optional[int],
    ) -> Tuple[SwapQuote, Optional[int]]:
        slippage = slippage_bps if slippage_bps is not None else self.slippage_bps
        quote = self.jupiter.get_quote(input_mint, output_mint, amount_in, slippage)
        if quote is None:
            raise NoRouteError(input_mint, output_mint, amount_in)

        final_amount = quote.out_amount if quote.out_amount > 0 else None
        return quote, final_amount

    def _execute_swap(self, quote: SwapQuote) -> str:
        """Build, sign, send and confirm the swap. Returns the signature."""
        tx_bytes = self.jupiter.get_swap_transaction(
            quote,
            str(self.wallet.pubkey()),
            priority_fee=self.priority_fee_lamports,
        )

        unsigned = VersionedTransaction.from_bytes(tx_bytes)
        signed = VersionedTransaction(unsigned.message, [self.wallet])

        signature = self._send(bytes(signed))
        self._confirm(signature)

        logger.info(f"Swap confirmed: {signature}")
        return str(signature)

    def _send(self, raw_tx: bytes):
        """
        Send a signed transaction.

        Re-sending identical signed bytes cannot double-spend; they share
        one signature.
        """
        opts = TxOpts(skip_preflight=False, preflight_commitment=Confirmed)

        for attempt in range(1, self.send_max_attempts + 1):
            try:
                response = self.rpc_client.send_raw_transaction(raw_tx, opts=opts)
                logger.info(f"Transaction sent: {response.value}")
                return response.value
            except Exception as e:
                if attempt >= self.send_max_attempts:
                    logger.error(f"Transaction send failed: {e}")
                    raise
                logger.warning(f"Send failed, retrying ({attempt}/{self.send_max_attempts}): {e}")
                time.sleep(self.confirm_poll_interval)

    def _confirm(self, signature) -> None:
        """
        Wait for 'confirmed' commitment.

        Raises:
            TransactionFailedError if the network reports an error
            ConfirmationTimeoutError after confirm_timeout
        """
        deadline = time.monotonic() + self.confirm_timeout

        while True:
            try:
                response = self.rpc_client.get_signature_statuses([signature])
                status = response.value[0] if response.value else None

                if status is not None:
                    if status.err:
                        logger.error(f"Transaction failed: {signature}: {status.err}")
                        raise TransactionFailedError(str(signature), status.err)
                    if status.confirmation_status in _LANDED:
                        return

            except TransactionFailedError:
                raise
            except Exception as e:
                logger.warning(f"Confirmation poll error: {e}")

            if time.monotonic() >= deadline:
                logger.error(f"Transaction confirmation timeout: {signature}")
                raise ConfirmationTimeoutError(str(signature), self.confirm_timeout)

            time.sleep(self.confirm_poll_interval)
