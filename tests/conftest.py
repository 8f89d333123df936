"""Shared fixtures: realistic `mvn dependency:tree -DoutputType=dot` dumps."""

import pytest

# Maven prints the closing brace with a trailing space.
END = "[INFO]  } "

SINGLE_MODULE_DUMP = "\n".join([
    "[INFO] Scanning for projects...",
    "[INFO] --- maven-dependency-plugin:3.6.1:tree (default-cli) @ app ---",
    '[INFO] digraph "com.example:app:jar:1.0.0" { ',
    '[INFO] \t"com.example:app:jar:1.0.0" -> "org.slf4j:slf4j-api:jar:2.0.9:compile" ; ',
    '[INFO] \t"com.example:app:jar:1.0.0" -> "com.google.guava:guava:jar:32.1.2-jre:compile" ; ',
    '[INFO] \t"com.example:app:jar:1.0.0" -> "junit:junit:jar:4.13.2:test" ; ',
    '[INFO] \t"com.google.guava:guava:jar:32.1.2-jre:compile" -> "com.google.guava:failureaccess:jar:1.0.1:compile" ; ',
    '[INFO] \t"junit:junit:jar:4.13.2:test" -> "org.hamcrest:hamcrest-core:jar:1.3:test" ; ',
    END,
    "[INFO] BUILD SUCCESS",
    "",
])

MULTI_MODULE_DUMP = "\n".join([
    "[INFO] Reactor Build Order:",
    '[INFO] digraph "com.example:parent:pom:1.0.0" { ',
    '[INFO] \t"com.example:parent:pom:1.0.0" -> "com.example:bom:pom:1.0.0:import" ; ',
    END,
    '[INFO] digraph "com.example:core:jar:1.0.0" { ',
    '[INFO] \t"com.example:core:jar:1.0.0" -> "org.slf4j:slf4j-api:jar:2.0.9:compile" ; ',
    '[INFO] \t"com.example:core:jar:1.0.0" -> "com.example:core-db:test-jar:tests:1.0.0:test" ; ',
    END,
    '[INFO] digraph "com.example:web:jar:1.0.0" { ',
    '[INFO] \t"com.example:web:jar:1.0.0" -> "com.example:core:jar:1.0.0:compile" ; ',
    '[INFO] \t"com.example:web:jar:1.0.0" -> "io.netty:netty-codec:jar:4.1.100.Final:compile" ; ',
    '[INFO] \t"com.example:core:jar:1.0.0:compile" -> "org.slf4j:slf4j-api:jar:2.0.9:compile" ; ',
    '[INFO] \t"io.netty:netty-codec:jar:4.1.100.Final:compile" -> "io.netty:netty-buffer:jar:4.1.100.Final:compile" ; ',
    END,
    "",
])


def _digraph(*edges, root=None):
    head = root or (edges[0][0] if edges else "com.example:app:jar:1.0.0")
    lines = [f'[INFO] digraph "{head}" {{ ']
    lines.extend(f'[INFO] \t"{left}" -> "{right}" ; ' for left, right in edges)
    lines.append(END)
    return "\n".join(lines) + "\n"


@pytest.fixture
def make_digraph():
    """Build one dot subgraph block from (left, right) coordinate pairs."""
    return _digraph


@pytest.fixture
def single_module_dump():
    return SINGLE_MODULE_DUMP


@pytest.fixture
def multi_module_dump():
    return MULTI_MODULE_DUMP
