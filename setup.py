from setuptools import setup, find_packages

setup(
    name="netswitcher",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "click",
        "toml",
        "rumps; sys_platform == 'darwin'",
        "pyobjc-framework-CoreWLAN; sys_platform == 'darwin'",
        "pyobjc-framework-CoreLocation; sys_platform == 'darwin'",
        "pyobjc-framework-SystemConfiguration; sys_platform == 'darwin'",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "netswitcher=netswitcher.cli:cli",
            "netswitcher-agent=netswitcher.watcher:main",
        ],
    },
    python_requires=">=3.10",
    description="Network configuration switcher for macOS",
    long_description="Save named IP/DNS configurations bound to a Wi-Fi network, router MAC, or wired service, and switch between them automatically when a known network is joined.",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: MacOS X",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Networking",
        "Topic :: System :: Systems Administration",
    ],
)
