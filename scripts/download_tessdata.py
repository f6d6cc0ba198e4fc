#!/usr/bin/env python3
"""
Download Tesseract language data for offline recognition.

Usage:
    python scripts/download_tessdata.py [--dest DIR] [--lang chi_sim] [--lang eng]

Files already present in the destination are skipped.
"""
import argparse
import os
import sys

import requests

from answerlens.domain.common.errors import PersistenceWriteFailure
from answerlens.domain.common.result import Result
from answerlens.infrastructure.config.paths import get_app_dir
from answerlens.infrastructure.logging.logger_service import ConsoleLoggerService

TESSDATA_URL = "https://github.com/tesseract-ocr/tessdata_fast/raw/main/{lang}.traineddata"
DEFAULT_LANGUAGES = ["chi_sim"]
CHUNK_SIZE = 64 * 1024


def format_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


def download_file(url: str, dest: str, logger) -> Result[int]:
    """Stream url into dest through a temporary file; returns the byte count."""
    temp_path = f"{dest}.part"
    try:
        with requests.get(url, stream=True, timeout=(10, 300)) as resp:
            resp.raise_for_status()
            total = int(resp.headers.get("content-length", 0))
            downloaded = 0
            with open(temp_path, "wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
                    downloaded += len(chunk)
                    if total:
                        print(f"\r   {downloaded * 100 // total}% ({format_size(downloaded)} / {format_size(total)})",
                              end="", flush=True)
        print()
        os.replace(temp_path, dest)
        return Result.ok(downloaded)
    except (requests.RequestException, OSError) as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        error = PersistenceWriteFailure(
            message=f"Download failed: {e}",
            details={"url": url, "dest": dest},
            inner_error=e
        )
        logger.error(str(error))
        return Result.fail(error)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Download Tesseract language data")
    parser.add_argument("--dest", default=os.path.join(str(get_app_dir()), "tessdata"),
                        help="Target tessdata directory")
    parser.add_argument("--lang", action="append", dest="languages",
                        help="Language code, may be repeated (default: chi_sim)")
    args = parser.parse_args(argv)

    logger = ConsoleLoggerService(name="download_tessdata")
    os.makedirs(args.dest, exist_ok=True)

    failures = 0
    for lang in args.languages or DEFAULT_LANGUAGES:
        dest = os.path.join(args.dest, f"{lang}.traineddata")
        if os.path.exists(dest):
            logger.info(f"Skipping {lang}, already present ({format_size(os.path.getsize(dest))})")
            continue

        url = TESSDATA_URL.format(lang=lang)
        logger.info(f"Downloading {lang}", url=url)
        result = download_file(url, dest, logger)
        if result.is_failure:
            failures += 1
        else:
            logger.info(f"Downloaded {lang} ({format_size(result.value)})", dest=dest)

    if failures:
        logger.warning(f"{failures} download(s) failed, check the network and retry")
        return 1
    logger.info(f"Language data ready in {args.dest}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
