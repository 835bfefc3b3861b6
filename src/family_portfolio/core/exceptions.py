"""Custom exceptions for the family portfolio tracker."""


class FamilyPortfolioError(Exception):
    """Base exception."""
    pass


class ReferenceNotFoundError(FamilyPortfolioError):
    """A ledger record points at a member, security or row that does not exist."""

    def __init__(self, kind: str, ref_id):
        self.kind = kind
        self.ref_id = ref_id
        super().__init__(f"{kind} {ref_id} not found")


class InvalidTransactionError(FamilyPortfolioError):
    pass


class AllocationMismatchError(InvalidTransactionError):
    pass


class InsufficientSharesError(InvalidTransactionError):
    pass


class InvalidContributionError(FamilyPortfolioError):
    pass


class DuplicateSecurityError(FamilyPortfolioError):
    pass
