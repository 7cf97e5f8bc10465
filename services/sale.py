from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.exceptions import ConstraintViolationError, NotFoundError
from core.log import logger
from models.Sale import Sale
from models.SaleDetail import SaleDetail
from repository import sale as saleRepo


class SaleService:
    def __init__(self, db: Session):
        self.db = db

    def get_sale_by_id(self, sale_id: int) -> Sale:
        sale = saleRepo.get_sale_by_id(self.db, sale_id)
        if sale is None:
            raise NotFoundError(f"Sale with ID {sale_id} not found")
        return sale

    def get_all_sales(self) -> Sequence[Sale]:
        return saleRepo.get_sales(self.db)

    def get_active_sales(self) -> Sequence[Sale]:
        return saleRepo.get_sales(self.db, is_active=True)

    def get_sales_by_user_id(self, user_id: int) -> Sequence[Sale]:
        return saleRepo.get_sales(self.db, user_id=user_id)

    def get_sales_by_partner_id(self, partner_id: int) -> Sequence[Sale]:
        return saleRepo.get_sales(self.db, partner_id=partner_id)

    def get_sales_by_date_range(
        self, start_date: datetime, end_date: datetime
    ) -> Sequence[Sale]:
        return saleRepo.get_sales(self.db, start_date=start_date, end_date=end_date)

    def get_paginated(self, page_index: int, page_size: int) -> dict:
        return saleRepo.get_sales_per_page(self.db, page_index, page_size)

    def create_sale(
        self,
        total_amount: Decimal,
        sale_details: Optional[Iterable[dict]] = None,
        user_id: Optional[int] = None,
        partner_id: Optional[int] = None,
    ) -> Sale:
        """Create a sale header then its details, in input order.

        Header and details share one transaction, a failing detail leaves
        nothing behind.
        """
        try:
            sale = saleRepo.insert_sale(
                self.db,
                total_amount=total_amount,
                user_id=user_id,
                partner_id=partner_id,
                is_commit=False,
            )
            for detail in sale_details or []:
                saleRepo.insert_sale_detail(
                    self.db,
                    sale_id=sale.id,
                    amount=detail["amount"],
                    ticket_id=detail.get("ticket_id"),
                    is_commit=False,
                )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Sale creation rolled back: {e.orig}")
            raise ConstraintViolationError(f"Sale violates a constraint: {e.orig}")

        return self.get_sale_by_id(sale.id)

    def update_sale(self, sale_id: int, **patch) -> Sale:
        sale = self.get_sale_by_id(sale_id)
        return saleRepo.update_sale(self.db, sale, **patch)

    def activate_sale(self, sale_id: int) -> Sale:
        return saleRepo.update_sale(self.db, self.get_sale_by_id(sale_id), is_active=True)

    def deactivate_sale(self, sale_id: int) -> Sale:
        return saleRepo.update_sale(
            self.db, self.get_sale_by_id(sale_id), is_active=False
        )

    def soft_delete_sale(self, sale_id: int) -> Sale:
        # details keep their own flag
        sale = saleRepo.get_sale_by_id(self.db, sale_id, include_deleted=True)
        if sale is None:
            raise NotFoundError("Sale does not exist")
        return saleRepo.update_sale(self.db, sale, deleted=True)

    def restore_sale(self, sale_id: int) -> Sale:
        sale = saleRepo.get_sale_by_id(self.db, sale_id, include_deleted=True)
        if sale is None:
            raise NotFoundError("Sale does not exist")
        return saleRepo.update_sale(self.db, sale, deleted=False)

    def get_sale_detail_by_id(self, detail_id: int) -> SaleDetail:
        detail = saleRepo.get_sale_detail_by_id(self.db, detail_id)
        if detail is None:
            raise NotFoundError(f"Sale detail with ID {detail_id} not found")
        return detail

    def get_sale_details_by_sale_id(self, sale_id: int) -> Sequence[SaleDetail]:
        return saleRepo.get_sale_details_by_sale_id(self.db, sale_id)

    def update_sale_detail(self, detail_id: int, **patch) -> SaleDetail:
        detail = self.get_sale_detail_by_id(detail_id)
        return saleRepo.update_sale_detail(self.db, detail, **patch)

    def soft_delete_sale_detail(self, detail_id: int) -> SaleDetail:
        detail = saleRepo.get_sale_detail_by_id(self.db, detail_id, include_deleted=True)
        if detail is None:
            raise NotFoundError("Sale detail does not exist")
        return saleRepo.update_sale_detail(self.db, detail, deleted=True)

    def restore_sale_detail(self, detail_id: int) -> SaleDetail:
        detail = saleRepo.get_sale_detail_by_id(self.db, detail_id, include_deleted=True)
        if detail is None:
            raise NotFoundError("Sale detail does not exist")
        return saleRepo.update_sale_detail(self.db, detail, deleted=False)

    def get_statistics(self) -> dict:
        total_sales = saleRepo.count_sales(self.db)
        active_sales = saleRepo.count_sales(self.db, Sale.is_active.is_(True))
        total_revenue, average = saleRepo.get_sales_revenue(self.db)
        return {
            "total_sales": total_sales,
            "active_sales": active_sales,
            "total_revenue": total_revenue,
            "average_sale_amount": average,
        }
