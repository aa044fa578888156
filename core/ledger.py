"""
Running per-account balance ledger for one batch.
"""
from typing import Dict, List

from core.exceptions import DataNotFoundError
from core.logger import setup_logger
from core.schema import AccountSummary, PartyReference, TransactionRecord

logger = setup_logger(__name__)


class Ledger:
    """
    Balances keyed by PartyReference, plus the order in which references
    were seen.

    Accounts are created with a zero balance the first time they are
    touched. Balances may go negative.
    """

    def __init__(self):
        self._balances: Dict[PartyReference, int] = {}
        self._touched: List[PartyReference] = []

    def __contains__(self, party: PartyReference) -> bool:
        return party in self._balances

    def touch(self, party: PartyReference) -> None:
        """
        Record an occurrence of a reference and seed its balance if new.

        Args:
            party: Originator or recipient reference
        """
        self._touched.append(party)
        if party not in self._balances:
            self._balances[party] = 0
            logger.debug(f"Opened ledger account {party}")

    def balance_of(self, party: PartyReference) -> int:
        """
        Get the current balance of an account.

        Raises:
            DataNotFoundError: If the account was never touched
        """
        try:
            return self._balances[party]
        except KeyError:
            raise DataNotFoundError(
                f"No ledger account for {party}",
                details={
                    "routing_number": party.routing_number,
                    "account_number": party.account_number,
                }
            )

    def apply(self, transaction: TransactionRecord) -> None:
        """
        Move a transaction's amount from its payer to its payee.

        For credits the originator pays the recipient; for debits the
        roles are inverted.

        Args:
            transaction: Completed transaction record

        Raises:
            DataNotFoundError: If either account was never touched
        """
        payer = transaction.payer
        payee = transaction.payee

        # Check both before mutating either
        self.balance_of(payer)
        self.balance_of(payee)

        self._balances[payer] -= transaction.amount
        self._balances[payee] += transaction.amount

        logger.debug(
            f"Applied transaction {transaction.number} ({transaction.kind.value}): "
            f"{transaction.amount} from {payer} to {payee}"
        )

    def touched_pairs(self) -> List[PartyReference]:
        """
        Get touched references in first-seen order, duplicates removed.

        Returns:
            List of unique references
        """
        return list(dict.fromkeys(self._touched))

    def summaries(self) -> List[AccountSummary]:
        """
        Project the ledger into account summaries in first-seen order.

        Returns:
            One AccountSummary per unique touched reference
        """
        return [
            AccountSummary(
                routing_number=party.routing_number,
                account_number=party.account_number,
                net_transactions=self._balances[party],
            )
            for party in self.touched_pairs()
        ]

    def total(self) -> int:
        """Sum of all balances. Zero for any fully applied batch."""
        return sum(self._balances.values())
