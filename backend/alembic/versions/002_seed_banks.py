"""Seed the bank directory

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BANKS = [
    ("001", "BCO DO BRASIL S.A.", "Banco do Brasil S.A."),
    ("033", "BCO SANTANDER (BRASIL) S.A.", "Banco Santander (Brasil) S.A."),
    ("077", "BANCO INTER", "Banco Inter S.A."),
    ("104", "CAIXA ECONOMICA FEDERAL", "Caixa Econômica Federal"),
    ("208", "BANCO BTG PACTUAL S.A.", "Banco BTG Pactual S.A."),
    ("237", "BCO BRADESCO S.A.", "Banco Bradesco S.A."),
    ("260", "NU PAGAMENTOS - IP", "Nu Pagamentos S.A. - Instituição de Pagamento"),
    ("290", "PAGSEGURO INTERNET IP S.A.", "PagSeguro Internet Instituição de Pagamento S.A."),
    ("323", "MERCADO PAGO IP LTDA.", "Mercado Pago Instituição de Pagamento Ltda."),
    ("336", "BCO C6 S.A.", "Banco C6 S.A."),
    ("341", "ITAÚ UNIBANCO S.A.", "Itaú Unibanco S.A."),
    ("748", "BCO COOPERATIVO SICREDI S.A.", "Banco Cooperativo Sicredi S.A."),
    ("756", "BANCO SICOOB S.A.", "Banco Cooperativo Sicoob S.A."),
]


def upgrade() -> None:
    banks = sa.table(
        "banks",
        sa.column("code", sa.String),
        sa.column("name", sa.String),
        sa.column("full_name", sa.String),
    )
    op.bulk_insert(
        banks,
        [{"code": code, "name": name, "full_name": full_name} for code, name, full_name in BANKS],
    )


def downgrade() -> None:
    op.execute(sa.text("DELETE FROM banks"))
