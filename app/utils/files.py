# app/utils/files.py

import uuid
from pathlib import Path

import aiofiles
from fastapi import HTTPException, status

from app.core.config import settings


async def save_pdf_bytes(filename: str, pdf_bytes: bytes) -> Path:
    """
    생성된 PDF를 CERTIFICATE_OUTPUT_DIR 아래에 저장합니다.

    - 같은 이름의 파일을 덮어쓰지 않도록 UUID 접두어를 붙입니다.
    - 저장 경로를 반환합니다.

    Args:
        filename (str): 다운로드 파일명 (예: "certificate-CERT-001.pdf")
        pdf_bytes (bytes): PDF 내용

    Returns:
        Path: 저장된 파일의 전체 경로
    """
    # 설정 값을 호출 시점에 읽어야 monkeypatch로 변경한 경로가 반영됩니다.
    output_dir = Path(settings.CERTIFICATE_OUTPUT_DIR)
    output_dir.mkdir(parents=True, exist_ok=True)

    save_path = output_dir / f"{uuid.uuid4().hex[:8]}-{Path(filename).name}"
    try:
        async with aiofiles.open(save_path, "wb") as f:
            await f.write(pdf_bytes)
    except OSError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"PDF 저장 중 오류 발생: {e}",
        )
    return save_path
