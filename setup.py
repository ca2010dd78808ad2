import setuptools
from pathlib import Path

ROOT = Path(__file__).parent


def read_requirements(filename: str = "requirements.txt") -> list[str]:
    req_path = ROOT / filename
    if not req_path.exists():
        return []
    reqs: list[str] = []
    for line in req_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        reqs.append(line)
    return reqs


def read_long_description(filename: str = "README.md") -> str:
    path = ROOT / filename
    return path.read_text(encoding="utf-8") if path.exists() else ""


setuptools.setup(
    name="rashgrad",
    version="0.1.0",
    description=(
        "rashgrad is a minimal reverse-mode automatic differentiation engine "
        "over NumPy-backed n-dimensional arrays, with broadcasting, reductions "
        "and batched matrix multiplication."
    ),
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    license="Apache-2.0",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src", include=["rashgrad", "rashgrad.*"]),
    python_requires=">=3.10",
    install_requires=read_requirements(),
    extras_require={"test": ["pytest"]},
    zip_safe=False,
)
