"""
One-time script to map catalog songs to Spotify track IDs.

Usage:
    python -m scripts.map_spotify_tracks CLIENT_ID CLIENT_SECRET [--songs-dir DIR]

Get credentials from https://developer.spotify.com/dashboard (create an app,
copy its Client ID and Client Secret).
"""

import argparse
import sys
from pathlib import Path

import requests

from config import APP_VERSION, CATALOG_SETTINGS, PATHS, init_config
from services.spotify_mapping import SpotifyCatalogMapper, SpotifyClient


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Add Spotify track ids to the song catalogs")
    p.add_argument("client_id")
    p.add_argument("client_secret")
    p.add_argument("--songs-dir", type=Path, default=PATHS.songs_dir)
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    init_config()

    client = SpotifyClient(args.client_id, args.client_secret)
    print("Getting Spotify access token...")
    try:
        client.authenticate()
    except requests.RequestException as e:
        print(f"Auth failed: {e}", file=sys.stderr)
        return 1
    print("Token obtained\n")

    mapper = SpotifyCatalogMapper(client)
    for filename in CATALOG_SETTINGS.files.values():
        path = args.songs_dir / filename
        if not path.exists():
            print(f"Skipping {path}: not found")
            continue

        print(f"Processing {filename}...")

        def progress(i, song, track_id):
            status = track_id or "not found"
            print(f"  [{i + 1}] {song.get('artist')} - {song.get('track')}... {status}")

        report = mapper.map_file(path, on_progress=progress)
        print(f"\n{filename} updated: {report.found} found, {report.not_found} not found\n")

    print("Done! All song files have been updated with Spotify track IDs.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
