import logging

from django.db import transaction

from cash.models import CashEntry
from notifications.models import Activity, Notification
from sales.models import GroceryReturn, GrocerySale, MachineBatch, MachineSale
from stock.models import FinishedBatch, GroceryBatch, StockEntry, TransferRecord

logger = logging.getLogger(__name__)

# orden de borrado: primero lo que referencia a otras tablas transaccionales
TRANSACTION_MODELS = [
    MachineSale,
    MachineBatch,
    GrocerySale,
    GroceryReturn,
    GroceryBatch,
    StockEntry,
    FinishedBatch,
    CashEntry,
    TransferRecord,
    Notification,
    Activity,
]


@transaction.atomic
def clear_transactions():
    """
    Borra todos los movimientos. Conserva usuarios, sucursales e ítems.
    Devuelve {modelo: filas_borradas}.
    """
    summary = {}
    for model in TRANSACTION_MODELS:
        deleted, _ = model.objects.all().delete()
        summary[model._meta.model_name] = deleted
    logger.warning("Datos transaccionales borrados: %s", summary)
    return summary
