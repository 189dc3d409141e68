"""Export failures."""


class RenderError(Exception):
    """The PDF backend could not produce document bytes.

    Raised instead of returning partial output. Missing template sources
    and missing cover images are recovered inside the backend and never
    surface as this error.
    """
