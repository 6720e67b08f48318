# setup.py
from setuptools import find_packages, setup

setup(
    name="BlockPlanner",
    version="0.1.0",
    description="Voxel build planner core: sparse block store, undo history, groups and fill-command export",
    packages=find_packages(include=["engine", "engine.*", "world", "world.*", "editor", "editor.*", "tools", "tools.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "blockplanner-export=tools.export_mcfunction:main",
        ],
    },
)
