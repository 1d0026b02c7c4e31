"""Transformation types, their prompts, and the display catalog."""
from enum import Enum
from typing import Dict, List, Any

from utils.logger import get_logger

logger = get_logger("transformations.services")


class TransformationType(str, Enum):
    """Identifiers selecting which prompt template is used."""
    BABY_BLUR = "baby_blur"
    AVATAR = "avatar"
    AGE_PROGRESSION = "age_progression"
    AGE_REGRESSION = "age_regression"
    PET_GENERATOR = "pet_generator"
    COUPLE_GENERATOR = "couple_generator"
    STYLE_ANIME = "style_anime"
    STYLE_PAINTING = "style_painting"
    STYLE_CARTOON = "style_cartoon"


DEFAULT_TRANSFORMATION = TransformationType.BABY_BLUR
FALLBACK_TRANSFORMATION = TransformationType.AVATAR


PROMPTS: Dict[TransformationType, str] = {
    TransformationType.BABY_BLUR: (
        "A candid iPhone selfie photo showing a complete family of three people: two parents with their "
        "small child around 4 years old. All three faces clearly visible, smiling naturally. "
        "Portrait orientation, photorealistic quality."
    ),
    TransformationType.AVATAR: (
        "A high-quality 3D Pixar-style avatar character based on the person in the photo. Cute, stylized, "
        "colorful, professional digital art style. Clean background, front-facing view, vibrant colors, "
        "Disney/Pixar animation quality."
    ),
    TransformationType.AGE_PROGRESSION: (
        "A photorealistic portrait showing the same person aged 20 years older. Natural aging process, "
        "realistic wrinkles, mature features, same facial structure and characteristics, professional "
        "portrait photography quality."
    ),
    TransformationType.AGE_REGRESSION: (
        "A photorealistic portrait showing the same person as a young child around 8 years old. Maintain "
        "same facial features and characteristics, innocent child-like expression, soft lighting, portrait "
        "photography quality."
    ),
    TransformationType.PET_GENERATOR: (
        "A cute, friendly dog that would perfectly match the personality of the person in the photo. The dog "
        "should have similar facial expressions and personality traits. High-quality pet photography, "
        "adorable, heartwarming."
    ),
    TransformationType.COUPLE_GENERATOR: (
        "A photorealistic portrait of an attractive person who would be the perfect romantic partner match "
        "for the person in the photo. Complementary features, similar age, attractive, warm smile, "
        "professional portrait photography."
    ),
    TransformationType.STYLE_ANIME: (
        "Transform the person into a beautiful high-quality anime character. Japanese anime art style, "
        "detailed, vibrant colors, expressive eyes, professional anime illustration quality."
    ),
    TransformationType.STYLE_PAINTING: (
        "Transform the person into a classical oil painting portrait. Renaissance painting style, "
        "masterpiece quality, rich colors, artistic brushwork, museum-quality classical art."
    ),
    TransformationType.STYLE_CARTOON: (
        "Transform the person into a fun cartoon character. Colorful, exaggerated features, friendly "
        "expression, professional cartoon illustration style, vibrant and playful."
    ),
}


# Display order is part of the public contract
CATALOG: List[Dict[str, str]] = [
    {
        "id": TransformationType.AVATAR.value,
        "name": "Avatar Pixar",
        "description": "Transform into a cute 3D Pixar-style character",
        "icon": "🎭",
        "category": "Character",
    },
    {
        "id": TransformationType.AGE_PROGRESSION.value,
        "name": "Age Progression",
        "description": "See how you'll look 20 years older",
        "icon": "👴",
        "category": "Age",
    },
    {
        "id": TransformationType.AGE_REGRESSION.value,
        "name": "Age Regression",
        "description": "See how you looked as a child",
        "icon": "👶",
        "category": "Age",
    },
    {
        "id": TransformationType.PET_GENERATOR.value,
        "name": "Your Perfect Pet",
        "description": "Find the dog that matches your personality",
        "icon": "🐕",
        "category": "Animals",
    },
    {
        "id": TransformationType.COUPLE_GENERATOR.value,
        "name": "Perfect Match",
        "description": "Generate your ideal romantic partner",
        "icon": "💕",
        "category": "Romance",
    },
    {
        "id": TransformationType.STYLE_ANIME.value,
        "name": "Anime Style",
        "description": "Transform into anime character",
        "icon": "🎌",
        "category": "Art Style",
    },
    {
        "id": TransformationType.STYLE_PAINTING.value,
        "name": "Classical Painting",
        "description": "Renaissance masterpiece portrait",
        "icon": "🎨",
        "category": "Art Style",
    },
    {
        "id": TransformationType.STYLE_CARTOON.value,
        "name": "Cartoon Style",
        "description": "Fun cartoon character version",
        "icon": "🎪",
        "category": "Art Style",
    },
    {
        "id": TransformationType.BABY_BLUR.value,
        "name": "Family Photo",
        "description": "Generate family photo with child",
        "icon": "👨‍👩‍👦",
        "category": "Family",
    },
]


def get_prompt(transformation_type: str) -> str:
    """
    Return the prompt for a transformation id.

    Unknown ids fall back to the avatar prompt rather than failing.
    """
    try:
        return PROMPTS[TransformationType(transformation_type)]
    except ValueError:
        logger.info(f"Unknown transformation type '{transformation_type}', using '{FALLBACK_TRANSFORMATION.value}' prompt")
        return PROMPTS[FALLBACK_TRANSFORMATION]


def list_transformations() -> List[Dict[str, Any]]:
    """Return a copy of the catalog in display order."""
    return [dict(entry) for entry in CATALOG]
