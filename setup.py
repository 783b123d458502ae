# Copyright DataStax, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import re
from os import path

from setuptools import setup

this_directory = path.abspath(path.dirname(__file__))
with open(path.join(this_directory, "README.MD"), encoding="utf-8") as f:
    long_description = f.read()

with open(
    path.join(this_directory, "rowset", "settings", "defaults.py"), encoding="utf-8"
) as f:
    version_match = re.search(r'^ROWSET_VERSION = "([^"]+)"', f.read(), re.MULTILINE)
    if version_match is None:
        raise RuntimeError("Unable to find ROWSET_VERSION in rowset/settings.")
    version = version_match.group(1)

install_requires = [
    req_line.strip()
    for req_line in open(path.join(this_directory, "requirements.txt")).readlines()
    if req_line.strip() != ""
    if req_line.strip()[0] != "#"
    if "-e ." not in req_line
]

tests_require = [
    req_line.strip()
    for req_line in open(path.join(this_directory, "requirements-dev.txt")).readlines()
    if req_line.strip() != ""
    if req_line.strip()[0] != "#"
    if "-e ." not in req_line
]

setup(
    name="rowset",
    packages=[
        "rowset",
        "rowset.data",
        "rowset.exceptions",
        "rowset.settings",
        "rowset.utils",
    ],
    package_data={"rowset": ["py.typed"]},
    version=version,
    license="Apache license 2.0",
    description="A paged, thread-safe query result cursor for page-oriented database protocols",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords=["Cassandra", "paging", "cursor"],
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require={"test": tests_require},
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Database :: Front-Ends",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
