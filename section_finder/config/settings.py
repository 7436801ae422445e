
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    search_threshold: float = 0.60
    search_max_results: int = 20
    search_max_pages: int = 50
    min_selection_length: int = 10
    same_section_iou: float = 0.3
    extraction_batch_size: int = 5

    group_max_line_gap: float = 30.0
    group_max_column_gap: float = 150.0
    group_row_tolerance: float = 5.0

    column_tolerance: float = 20.0
    column_gate_min_overlap: float = 0.15

    # Text-only backend
    ngram_threshold: float = 0.8
    ngram_min_gram: int = 2
    ngram_max_gram: int = 3
    ngram_min_text_length: int = 15

    group_cache_size: int = 32

    render_scale: float = 1.0
    pdf_reader: str = "pymupdf"  # "pymupdf" | "pypdf"

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
