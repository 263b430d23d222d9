from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from storefront.core.deps import get_db
from storefront.repositories import (
    active_skus,
    create_country,
    create_sku,
    delete_country,
    delete_sku,
    get_country,
    get_sku,
    list_countries,
    list_country_shippings,
    list_skus,
    update_sku,
)
from storefront.schemas import CountryCreate, CountryRead, ShippingRead, SkuCreate, SkuRead, SkuUpdate

router = APIRouter(prefix="/v1")


def _sku_or_404(db: Session, sku_id: int):
    sku = get_sku(db, sku_id)
    if not sku:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="SKU not found")
    return sku


def _country_or_404(db: Session, country_id: int):
    country = get_country(db, country_id)
    if not country:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Country not found")
    return country


@router.get("/skus", response_model=list[SkuRead])
def http_list_skus(active_only: bool = False, db: Session = Depends(get_db)):
    return active_skus(db) if active_only else list_skus(db)


@router.get("/skus/{sku_id}", response_model=SkuRead)
def http_get_sku(sku_id: int, db: Session = Depends(get_db)):
    return _sku_or_404(db, sku_id)


@router.post("/skus", response_model=SkuRead, status_code=status.HTTP_201_CREATED)
def http_create_sku(payload: SkuCreate, db: Session = Depends(get_db)):
    return create_sku(db, payload)


@router.patch("/skus/{sku_id}", response_model=SkuRead)
def http_update_sku(sku_id: int, payload: SkuUpdate, db: Session = Depends(get_db)):
    return update_sku(db, _sku_or_404(db, sku_id), payload)


@router.delete("/skus/{sku_id}", status_code=status.HTTP_204_NO_CONTENT)
def http_delete_sku(sku_id: int, db: Session = Depends(get_db)):
    delete_sku(db, _sku_or_404(db, sku_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/countries", response_model=list[CountryRead])
def http_list_countries(db: Session = Depends(get_db)):
    return list_countries(db)


@router.get("/countries/{country_id}", response_model=CountryRead)
def http_get_country(country_id: int, db: Session = Depends(get_db)):
    return _country_or_404(db, country_id)


@router.post("/countries", response_model=CountryRead, status_code=status.HTTP_201_CREATED)
def http_create_country(payload: CountryCreate, db: Session = Depends(get_db)):
    return create_country(db, payload)


@router.get("/countries/{country_id}/shippings", response_model=list[ShippingRead])
def http_list_country_shippings(country_id: int, db: Session = Depends(get_db)):
    return list_country_shippings(db, _country_or_404(db, country_id))


@router.delete("/countries/{country_id}", status_code=status.HTTP_204_NO_CONTENT)
def http_delete_country(country_id: int, db: Session = Depends(get_db)):
    delete_country(db, _country_or_404(db, country_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
