# flake8: noqa
# scripts/render_certificate.py

import asyncio
from pathlib import Path
from typing import Optional

import aiofiles
import typer
from fastapi import HTTPException
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.database import AsyncSessionLocal, create_db_and_tables
from app.core.exceptions import LimsError
from app.services.certificate_service import CertificateService, certificate_filename
from app.services.pdf_renderer import PdfRenderer

cli = typer.Typer()


async def export_certificate(
    db: AsyncSession,
    renderer: Optional[PdfRenderer],
    entry_id: int,
    *,
    output: Optional[Path] = None,
    html_only: bool = False,
    strict: Optional[bool] = None,
) -> Path:
    """
    등록부 항목 하나의 인증서를 파일로 내보내는 비동기 함수
    html_only이면 렌더러를 사용하지 않고 미리보기 HTML을 저장합니다.
    """
    service = CertificateService(db, renderer)
    data = await service.build_certificate_data(entry_id, strict=strict)
    html = await service.certificate_html(data)

    filename = certificate_filename(data, entry_id)
    if html_only:
        filename = filename[: -len(".pdf")] + ".html"
    target = output or Path(settings.CERTIFICATE_OUTPUT_DIR) / filename
    target.parent.mkdir(parents=True, exist_ok=True)

    if html_only:
        async with aiofiles.open(target, "w", encoding="utf-8") as f:
            await f.write(html)
    else:
        pdf_bytes = await renderer.render_pdf(html)
        async with aiofiles.open(target, "wb") as f:
            await f.write(pdf_bytes)
    return target


@cli.command()
def main(
    entry_id: int = typer.Argument(..., help="인증서를 만들 등록부 항목 ID입니다."),
    output: Optional[Path] = typer.Option(
        None, '--output', '-o',
        help="저장할 파일 경로입니다. (기본값: CERTIFICATE_OUTPUT_DIR/<인증서 파일명>)"
    ),
    html_only: bool = typer.Option(False, '--html', help="PDF 대신 미리보기 HTML을 저장합니다."),
    strict: bool = typer.Option(False, '--strict', help="누락 측정값이 있으면 실패합니다."),
):
    """
    등록부 항목의 시험 인증서를 PDF(또는 HTML) 파일로 내보냅니다.
    """
    async def run_export() -> Path:
        await create_db_and_tables()
        renderer = None if html_only else PdfRenderer()
        try:
            async with AsyncSessionLocal() as db:
                return await export_certificate(
                    db, renderer, entry_id, output=output, html_only=html_only, strict=strict or None
                )
        finally:
            if renderer is not None:
                await renderer.close()

    try:
        path = asyncio.run(run_export())
    except HTTPException as e:
        print(f"오류: {e.detail}")
        raise typer.Exit(code=1)
    except LimsError as e:
        print(f"오류: {e}")
        raise typer.Exit(code=1)

    print(f"인증서가 저장되었습니다: {path}")


if __name__ == "__main__":
    cli()
