"""Download of detector model files on first use."""

from pathlib import Path
from typing import Optional, Union
import bz2
import logging
import shutil
import requests
from tqdm import tqdm

logger = logging.getLogger(__name__)


def ensure_model(filename: str,
                 url: str,
                 directory: Optional[Union[str, Path]] = None,
                 compressed: bool = False) -> str:
    """
    Ensure a model file exists locally, downloading it if necessary.

    Args:
        filename: Name of the model file on disk
        url: Download URL
        directory: Where to keep the model; current directory by default
        compressed: The download is bzip2-compressed and must be unpacked

    Returns:
        Path to the model file
    """
    model_path = Path(directory or Path.cwd()) / filename

    if model_path.exists():
        logger.info("Using existing model: %s", model_path)
        return str(model_path)

    logger.info("Model %s not found. Downloading from %s", filename, url)
    model_path.parent.mkdir(parents=True, exist_ok=True)
    download_path = model_path.with_name(model_path.name + (".bz2" if compressed else ".part"))

    try:
        # Download with progress bar
        response = requests.get(url, stream=True, timeout=30)
        response.raise_for_status()
        total_size = int(response.headers.get('content-length', 0))

        with open(download_path, 'wb') as f:
            with tqdm(total=total_size, unit='B', unit_scale=True, desc=f"Downloading {filename}") as pbar:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)
                        pbar.update(len(chunk))

        if compressed:
            with bz2.open(download_path, 'rb') as src, open(model_path, 'wb') as dst:
                shutil.copyfileobj(src, dst)
            download_path.unlink()
        else:
            download_path.replace(model_path)
    except (requests.RequestException, OSError) as e:
        download_path.unlink(missing_ok=True)
        raise RuntimeError(f"Failed to download model {filename}: {e}") from e

    logger.info("Model downloaded successfully to: %s", model_path)
    return str(model_path)
