import io
import re

from setuptools import find_packages, setup

__version__ = re.search(
    r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
    io.open("src/loadbalancer/version.py", encoding="utf_8_sig").read(),
).group(1)


setup(
    name="loadbalancer-python",
    version=__version__,
    description="loadbalancer is a Python library for least-loaded task dispatch and load rebalancing across worker nodes.",
    long_description="""loadbalancer is a Python library for least-loaded task dispatch and load rebalancing across worker nodes.""",
    author="",
    author_email="",
    package_dir={"": "src"},
    packages=find_packages("src"),
    zip_safe=False,
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "randomname",
        "numpy",
        "networkx",
        "pydantic>=2",
        "fire",
        "typing_extensions",
    ],
    extras_require={
        "tests": ["pytest"],
    },
)
