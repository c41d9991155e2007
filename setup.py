# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="roughcut",
    version="0.3.0",
    description="Roughcut: a small Lisp with reader macros, quasiquote and a Python host escape",
    packages=find_namespace_packages(include=["roughcut", "roughcut.*", "roughcut_lsp", "roughcut_lsp.*"]),
    package_data={"roughcut.prelude": ["*.lisp"]},
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol>=2023.0.0",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "roughcut=roughcut.__main__:main",
            "roughcut-ls=roughcut_lsp.server:main",
        ],
    },
    zip_safe=False,
)
