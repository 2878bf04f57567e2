from setuptools import find_packages, setup

setup(
    name="photo-chrono",
    version="0.1.0",
    description="Timed puzzle: put your photos in the order they were taken",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[
        "Pillow>=9.1",
        "piexif>=1.1",
    ],
    extras_require={
        "heif": ["pillow-heif"],
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["photo-chrono=photo_chrono.main:main"],
    },
)
