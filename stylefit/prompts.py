"""Fixed instructions sent to the image model."""

TRYON_PROMPT = (
    "Take the clothing item(s) from the subsequent image(s) and realistically "
    "place it onto the person in the first image. If there are two clothing "
    "items, layer them naturally in the order given (e.g., a jacket over a "
    "shirt). Make sure the fit, perspective, and lighting look natural. "
    "The output should be just the final image."
)
