from hopeshare.models.bank import Bank
from hopeshare.models.campaign import Campaign, CampaignComment, CampaignDonor
from hopeshare.models.deposit_request import DepositRequest
from hopeshare.models.donation import Donation
from hopeshare.models.financial_report import FinancialReport
from hopeshare.models.identity_validation import IdentityValidation
from hopeshare.models.payout_config import PayoutConfig
from hopeshare.models.report import Report
from hopeshare.models.user import User

__all__ = [
    "Bank",
    "Campaign",
    "CampaignComment",
    "CampaignDonor",
    "DepositRequest",
    "Donation",
    "FinancialReport",
    "IdentityValidation",
    "PayoutConfig",
    "Report",
    "User",
]
