"""Setup script for the Spotify playlist duplicate cleaner."""

from setuptools import setup, find_namespace_packages

setup(
    name="playlistcleaner",
    version="0.1.0",
    description="Find and remove duplicate tracks in Spotify playlists",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[
        "spotipy>=2.23.0",
        "requests>=2.25.0",
        "python-dotenv>=1.0.0",
        "tqdm>=4.0.0",
        "fastapi>=0.100.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-mock>=3.10.0",
            "anyio>=3.7.0",
            "httpx>=0.24.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "playlistcleaner=playlistcleaner.cli:main",
        ]
    },
)
