"""
Download and decompress the NOAA storm database (1950–2011).

This script downloads the bzip2-compressed StormData file, decompresses it,
and saves it to the raw layer (data/01_raw/) where the Kedro catalog
expects it.
"""

import bz2
import shutil
from pathlib import Path

import pandas as pd
import requests

URL = "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
RAW_DATA_DIR = Path("data/01_raw")


def download_storm_data(force: bool = False) -> str:
    """
    Download the storm database and decompress it to CSV.

    Args:
        force: Re-download even if the CSV is already present.

    Returns:
        str: Path to the decompressed CSV file
    """
    compressed_file = RAW_DATA_DIR / "StormData.csv.bz2"
    final_file = RAW_DATA_DIR / "StormData.csv"

    RAW_DATA_DIR.mkdir(parents=True, exist_ok=True)

    if final_file.exists() and not force:
        print(f"Already exists, skipping: {final_file}")
        return str(final_file)

    print("Downloading NOAA storm database...")
    print(f"Source: {URL}")
    print(f"Target: {final_file}")

    response = requests.get(URL, stream=True, timeout=60)
    response.raise_for_status()

    with open(compressed_file, "wb") as f:
        for chunk in response.iter_content(chunk_size=8192):
            f.write(chunk)

    print(f"Downloaded {compressed_file.stat().st_size / 1024 / 1024:.1f} MB")

    print("Decompressing file...")
    with bz2.open(compressed_file, "rb") as f_in, open(final_file, "wb") as f_out:
        shutil.copyfileobj(f_in, f_out)

    # Remove the compressed file to save space
    compressed_file.unlink()

    print(f"Decompressed to {final_file}")
    print(f"Final file size: {final_file.stat().st_size / 1024 / 1024:.1f} MB")

    return str(final_file)


def explore_data(file_path: str) -> None:
    """
    Print the columns the pipeline uses and the raw values it has to clean.

    Args:
        file_path: Path to the CSV file
    """
    print("\n" + "=" * 60)
    print("NOAA STORM DATABASE - DATA EXPLORATION")
    print("=" * 60)

    df = pd.read_csv(
        file_path,
        usecols=["EVTYPE", "FATALITIES", "INJURIES", "PROPDMG", "PROPDMGEXP", "CROPDMG", "CROPDMGEXP"],
        dtype={"EVTYPE": str, "PROPDMGEXP": str, "CROPDMGEXP": str},
        low_memory=False,
    )

    print("\nBASIC INFO")
    print(f"Row count: {len(df):,}")

    print("\nEVENT TYPES")
    event_types = df["EVTYPE"].str.strip().str.lower().value_counts()
    print(f"Distinct event descriptions: {len(event_types):,}")
    print(event_types.head(30).to_string())

    for col in ["PROPDMGEXP", "CROPDMGEXP"]:
        print(f"\n{col} TOKENS")
        print(df[col].fillna("<empty>").value_counts().to_string())


if __name__ == "__main__":
    csv_file = download_storm_data()
    explore_data(csv_file)
