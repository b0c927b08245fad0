from setuptools import setup, find_packages

setup(
    name="SimRel",
    version="0.1.0",
    packages=find_packages(include=["simrel", "simrel.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.25",
        "pandas",
        "scipy",
    ],
    extras_require={
        "parallel": ["joblib"],
        "progress": ["tqdm"],
        "test": ["pytest", "scikit-learn", "joblib"],
    },
    description="Simulation of Linear Model Data with Known Population Properties",
)
