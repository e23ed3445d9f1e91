# cryptic_chest/app/api/v1/endpoints/generator.py
from fastapi import APIRouter

from cryptic_chest.app.schemas.generator import (
    GeneratedPassword,
    PasswordRequest,
    StrengthRequest,
    StrengthResponse,
)
from cryptic_chest.app.security.generator import generate_password, password_strength, strength_label

router = APIRouter()


# No auth: generation is stateless and never touches stored data
@router.post("/password", response_model=GeneratedPassword)
async def create_generated_password(options: PasswordRequest):
    return {"password": generate_password(options)}


@router.post("/strength", response_model=StrengthResponse)
async def check_strength(request: StrengthRequest):
    score = password_strength(request.password)
    return {"score": score, "label": strength_label(score)}
