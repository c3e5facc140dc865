from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.orm import Session

from mouna.database import get_db
from mouna.integrations.openfoodfacts import ProductCatalog, get_product_catalog

from . import schemas, service
from .lookup import resolve_barcode

router = APIRouter()


@router.get("/products", response_model=schemas.ProductListOut)
def list_products(
    barcode: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return service.list_products(db, barcode=barcode, search=search, page=page, limit=limit)


@router.get("/products/lookup/{barcode}", response_model=schemas.LookupOut)
def lookup_barcode(
    barcode: str,
    db: Session = Depends(get_db),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    return resolve_barcode(db, barcode, catalog)


@router.get("/products/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return service.get_product(db, product_id)


@router.post(
    "/products",
    response_model=schemas.ProductWriteOut,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: schemas.ProductCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create a batch, or merge the quantity into the batch with the same barcode and expiry day."""
    product, merged = service.create_or_merge_product(db, payload)
    if merged:
        response.status_code = status.HTTP_200_OK

    out = schemas.ProductWriteOut.model_validate(product)
    out.merged = merged
    return out


@router.put("/products/{product_id}", response_model=schemas.ProductOut)
def update_product(
    product_id: int,
    payload: schemas.ProductUpdate,
    db: Session = Depends(get_db),
):
    return service.update_product(db, product_id, payload)


@router.delete("/products/{product_id}", response_model=schemas.DeleteOut)
def delete_product(
    product_id: int,
    payload: schemas.ProductDelete = Body(...),
    db: Session = Depends(get_db),
):
    return service.delete_product(db, product_id, payload)
