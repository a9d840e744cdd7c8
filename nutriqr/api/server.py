"""FastAPI server exposing NutriQR encoding, decoding and unit conversion."""

import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from nutriqr.app_logging import configure_logging
from nutriqr.codec.codec import create_nutriqr_string, decode_nutriqr_string, is_nutriqr_string
from nutriqr.codec.errors import NutriQRError
from nutriqr.codec.unit_conversion import convert_decoded_nutriqr
from nutriqr.data_layer.models import NutrientInput, Unit, UnitSystem
from nutriqr.output.formatters import format_record_json

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="NutriQR API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class NutrientsRequest(BaseModel):
    energy_kcal: float
    fat: float
    saturated_fat: float
    carbs: float
    sugar: float
    salt: float
    protein: float
    fibre: Optional[float] = None


class EncodeRequest(BaseModel):
    gtin13: str = ""
    manufacturer: str
    product_name: str
    unit: Unit
    base_quantity: float
    portion_factor: float = 1
    nutrients: NutrientsRequest


class PayloadRequest(BaseModel):
    payload: str = Field(..., description="NutriQR string as scanned from the QR code")


class ConvertRequest(PayloadRequest):
    target_system: UnitSystem


def _unprocessable(exc: NutriQRError) -> HTTPException:
    logger.info("Rejected NutriQR request: %s", exc.error_type.value)
    return HTTPException(status_code=422, detail=exc.to_dict())


@app.post("/api/encode")
def encode(request: EncodeRequest) -> Dict[str, str]:
    nutrients = NutrientInput(**request.nutrients.model_dump())
    try:
        payload = create_nutriqr_string(
            request.gtin13,
            request.manufacturer,
            request.product_name,
            request.unit,
            request.base_quantity,
            request.portion_factor,
            nutrients,
        )
    except NutriQRError as exc:
        raise _unprocessable(exc) from exc
    return {"payload": payload}


@app.post("/api/decode")
def decode(request: PayloadRequest) -> Dict[str, Any]:
    try:
        record = decode_nutriqr_string(request.payload)
    except NutriQRError as exc:
        raise _unprocessable(exc) from exc
    return format_record_json(record)


@app.post("/api/validate")
def validate(request: PayloadRequest) -> Dict[str, bool]:
    return {"valid": is_nutriqr_string(request.payload)}


@app.post("/api/convert")
def convert(request: ConvertRequest) -> Dict[str, Any]:
    try:
        record = decode_nutriqr_string(request.payload)
    except NutriQRError as exc:
        raise _unprocessable(exc) from exc
    return format_record_json(convert_decoded_nutriqr(record, request.target_system))


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
