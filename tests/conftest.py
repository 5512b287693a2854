import json
from pathlib import Path

import pytest

APP_JSON = {
    "expo": {
        "name": "lenmie-expo-template",
        "slug": "lenmie-expo-template",
        "ios": {"bundleIdentifier": "com.javiso.lenmieexpotemplate"},
        "android": {"package": "com.javiso.lenmieexpotemplate"},
    }
}

PACKAGE_JSON = {
    "name": "lenmie-expo-template",
    "version": "1.0.0",
    "main": "index.ts",
}


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    root = tmp_path / "template"
    (root / "src" / "screens").mkdir(parents=True)
    (root / "src" / "navigation").mkdir(parents=True)
    (root / "android" / "app").mkdir(parents=True)
    (root / "ios").mkdir()
    (root / "node_modules" / "react").mkdir(parents=True)
    (root / ".git").mkdir()

    (root / "app.json").write_text(json.dumps(APP_JSON, indent=2) + "\n", encoding="utf-8")
    (root / "package.json").write_text(json.dumps(PACKAGE_JSON, indent=2) + "\n", encoding="utf-8")
    (root / "README.md").write_text("# Template\n", encoding="utf-8")
    (root / "copy-template.sh").write_text("#!/bin/bash\n", encoding="utf-8")
    (root / ".gitignore").write_text("node_modules/\n", encoding="utf-8")
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    (root / "android" / "app" / "build.gradle").write_text("", encoding="utf-8")
    (root / "ios" / "Podfile").write_text("", encoding="utf-8")
    (root / "node_modules" / "react" / "index.js").write_text("", encoding="utf-8")
    (root / "src" / "screens" / "HomeScreen.tsx").write_text("export default function HomeScreen() {}\n", encoding="utf-8")
    (root / "src" / "navigation" / "AppNavigator.tsx").write_text("export const AppNavigator = null;\n", encoding="utf-8")
    (root / "src" / "README.md").write_text("# Nested docs\n", encoding="utf-8")
    return root
