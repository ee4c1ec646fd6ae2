"""Shared fixtures: POM files and fake repositories."""

from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

from pom_staleness.errors import QueryError
from pom_staleness.models import ArtifactCoordinate, ArtifactVersion, PackagingType


POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"


def artifact(identifier: str, packaging: PackagingType = PackagingType.JAR) -> ArtifactVersion:
    """Build an ArtifactVersion from ``group:artifact:version``."""
    group, artifact_id, version = identifier.split(":")
    return ArtifactVersion(
        coordinate=ArtifactCoordinate(group=group, artifact_id=artifact_id),
        version=version,
        packaging=packaging,
    )


class FakeRepository:
    """Answers from a fixed table; an Exception value makes the lookup fail."""

    def __init__(self, responses: Optional[Dict[str, Union[List[str], Exception]]] = None) -> None:
        self.responses = responses or {}
        self.calls: List[ArtifactVersion] = []

    def find_newer_than(self, artifact: ArtifactVersion) -> List[ArtifactVersion]:
        self.calls.append(artifact)
        answer = self.responses.get(str(artifact), [])
        if isinstance(answer, Exception):
            raise answer
        return [
            ArtifactVersion(coordinate=artifact.coordinate, version=name, packaging=artifact.packaging)
            for name in answer
        ]


def failure(identifier: str) -> QueryError:
    return QueryError(identifier, "connection refused")


@pytest.fixture
def write_pom(tmp_path: Path):
    def _write(body: str, name: str = "pom.xml", namespace: bool = True) -> Path:
        xmlns = f' xmlns="{POM_NAMESPACE}"' if namespace else ""
        path = tmp_path / name
        path.write_text(
            f'<?xml version="1.0" encoding="UTF-8"?>\n<project{xmlns}>\n'
            f"<modelVersion>4.0.0</modelVersion>\n{body}\n</project>\n",
            encoding="utf-8",
        )
        return path

    return _write


SAMPLE_POM = """
<groupId>com.example</groupId>
<artifactId>sample</artifactId>
<version>2.5.0</version>
<parent>
  <groupId>com.example</groupId>
  <artifactId>parent</artifactId>
  <version>1.4</version>
</parent>
<properties>
  <junit.version>5.3.1</junit.version>
  <nested>${junit.version}</nested>
</properties>
<dependencies>
  <dependency>
    <groupId>org.apache.maven</groupId>
    <artifactId>maven-plugin-api</artifactId>
    <version>2.0</version>
  </dependency>
  <dependency>
    <groupId>org.junit.jupiter</groupId>
    <artifactId>junit-jupiter-api</artifactId>
    <version>${junit.version}</version>
    <scope>test</scope>
  </dependency>
  <dependency>
    <groupId>com.example</groupId>
    <artifactId>sibling</artifactId>
    <version>${project.version}</version>
    <type>war</type>
  </dependency>
  <dependency>
    <groupId>com.example</groupId>
    <artifactId>missing-property</artifactId>
    <version>${not.declared}</version>
  </dependency>
  <dependency>
    <groupId>com.example</groupId>
    <artifactId>odd-type</artifactId>
    <version>1.0</version>
    <type>zip</type>
  </dependency>
</dependencies>
<dependencyManagement>
  <dependencies>
    <dependency>
      <groupId>com.example</groupId>
      <artifactId>managed-only</artifactId>
      <version>9.9</version>
    </dependency>
  </dependencies>
</dependencyManagement>
<build>
  <plugins>
    <plugin>
      <artifactId>maven-compiler-plugin</artifactId>
      <version>3.8.0</version>
    </plugin>
    <plugin>
      <groupId>org.codehaus.mojo</groupId>
      <artifactId>versions-maven-plugin</artifactId>
      <version>${nested}</version>
    </plugin>
  </plugins>
</build>
"""
