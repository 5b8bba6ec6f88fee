"""
Suivi des échéances payées d'une inscription.
"""

from typing import Optional

from app.models.payment import PaymentBucket
from app.schemas.financial import InstallmentProgress
from app.schemas.registration import Registration
from app.services.status_classifier import classify_payment


def track_installments(registration: Registration) -> InstallmentProgress:
    """
    Calcule le nombre d'échéances payées et le nombre total prévu.

    Le total est le plus grand nombre d'échéances annoncé par les paiements;
    à défaut le nombre de paiements; à défaut 1 (et 1/1 pour une inscription
    exonérée ou réglée directement). Le nombre payé n'est pas borné par le total.
    """
    payments = registration.payment_list
    paid = 0
    total: Optional[int] = None

    for payment in payments:
        if classify_payment(payment.status) == PaymentBucket.PAID:
            paid += 1
        hinted = payment.installment_hint
        if hinted is not None and hinted > 0:
            total = max(total or 0, hinted)

    if total is None:
        if payments:
            total = len(payments)
        else:
            total = 1
            if registration.is_admin_paid:
                paid = 1

    return InstallmentProgress(paid=paid, total=total)
