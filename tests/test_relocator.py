import json
import shutil

from pkgsource.domain.models import PackageSourceDescriptor
from pkgsource.storage.location import DIRECTORY_PATH_KEY, FILE_NAME


def _fail_move(*args, **kwargs):
    raise OSError("disk on fire")


def test_move_without_existing_file_only_repoints(services, preferences, notifier, monkeypatch, project_root):
    def unexpected_move(*args, **kwargs):
        raise AssertionError("no file should be moved")

    monkeypatch.setattr("pkgsource.storage.relocator.shutil.move", unexpected_move)

    assert services.relocator.move("Config") is True

    assert services.location.directory_path == "Config"
    assert services.location.full_path == project_root / "Config" / FILE_NAME
    assert preferences.get_string(DIRECTORY_PATH_KEY) == "Config"
    # A fresh load happened at the new location.
    assert (project_root / "Config" / FILE_NAME).exists()
    assert not (project_root / FILE_NAME).exists()
    assert services.resolver.configuration.file_path == str(project_root / "Config" / FILE_NAME)
    assert "rescan_assets" in notifier.calls


def test_failed_move_rolls_back(services, preferences, notifier, monkeypatch, project_root):
    services.resolver.active()
    old_path = project_root / FILE_NAME
    content = old_path.read_text(encoding="utf-8")
    preference_before = preferences.get_string(DIRECTORY_PATH_KEY)
    monkeypatch.setattr("pkgsource.storage.relocator.shutil.move", _fail_move)

    assert services.relocator.move("Config") is False

    assert services.location.directory_path == ""
    assert services.location.full_path == old_path
    assert preferences.get_string(DIRECTORY_PATH_KEY) == preference_before
    assert old_path.read_text(encoding="utf-8") == content
    assert not (project_root / "Config" / FILE_NAME).exists()
    assert services.resolver.configuration.file_path == str(old_path)
    assert "rescan_assets" not in notifier.calls


def test_successful_move_with_sidecar(services, preferences, notifier, project_root):
    services.resolver.active()
    sidecar = project_root / (FILE_NAME + ".meta")
    sidecar.write_text("guid: 1234", encoding="utf-8")

    assert services.relocator.move("Config") is True

    new_path = project_root / "Config" / FILE_NAME
    assert new_path.exists()
    assert (project_root / "Config" / (FILE_NAME + ".meta")).read_text(encoding="utf-8") == "guid: 1234"
    assert not (project_root / FILE_NAME).exists()
    assert not sidecar.exists()
    assert preferences.get_string(DIRECTORY_PATH_KEY) == "Config"
    assert services.resolver.configuration.file_path == str(new_path)
    assert notifier.calls[-1] == "rescan_assets"


def test_successful_move_without_sidecar(services, project_root):
    services.resolver.active()

    assert services.relocator.move("Nested/Config") is True

    new_dir = project_root / "Nested" / "Config"
    assert sorted(p.name for p in new_dir.iterdir()) == [FILE_NAME]
    assert not (project_root / FILE_NAME).exists()


def test_moved_file_keeps_its_contents(services, store, project_root):
    config = services.resolver.configuration
    config.add_source(PackageSourceDescriptor(name="local", location="/srv/packages"))
    config.set_active_source("local")
    store.save(config)

    assert services.relocator.move("Config") is True
    services.resolver.reload()

    assert services.resolver.active().names == ["local"]
    raw = json.loads((project_root / "Config" / FILE_NAME).read_text(encoding="utf-8"))
    assert raw["active_package_source"] == "local"


def test_existing_destination_file_is_not_overwritten(services, preferences, project_root):
    services.resolver.active()
    destination = project_root / "Config" / FILE_NAME
    destination.parent.mkdir()
    destination.write_text("{}", encoding="utf-8")

    assert services.relocator.move("Config") is False

    assert destination.read_text(encoding="utf-8") == "{}"
    assert (project_root / FILE_NAME).exists()
    assert services.location.directory_path == ""
    assert preferences.get_string(DIRECTORY_PATH_KEY) == ""


def test_move_to_current_directory_is_a_no_op(services, notifier, project_root):
    services.resolver.active()
    calls_before = list(notifier.calls)

    assert services.relocator.move("") is True

    assert (project_root / FILE_NAME).exists()
    assert notifier.calls == calls_before


def test_location_is_restored_from_preferences(make_services, preferences, project_root):
    services = make_services()
    services.resolver.active()
    assert services.relocator.move("Config") is True

    next_session = make_services()

    assert next_session.location.directory_path == "Config"
    assert next_session.location.full_path == project_root / "Config" / FILE_NAME
    assert next_session.location.full_path.exists()


def test_sidecar_failure_keeps_primary_move(services, monkeypatch, project_root):
    services.resolver.active()
    (project_root / (FILE_NAME + ".meta")).write_text("meta", encoding="utf-8")
    real_move = shutil.move

    def move_primary_only(src, dst):
        if src.endswith(".meta"):
            raise OSError("locked")
        return real_move(src, dst)

    monkeypatch.setattr("pkgsource.storage.relocator.shutil.move", move_primary_only)

    assert services.relocator.move("Config") is True
    assert (project_root / "Config" / FILE_NAME).exists()
    assert services.location.directory_path == "Config"


def test_failed_preference_write_rolls_back(services, preferences, notifier, monkeypatch, project_root):
    services.resolver.active()
    old_path = project_root / FILE_NAME

    def refuse(key, value):
        raise OSError("read-only preferences")

    monkeypatch.setattr(preferences, "set_string", refuse)

    assert services.relocator.move("Config") is False

    assert services.location.directory_path == ""
    assert services.location.full_path == old_path
    assert old_path.exists()
    assert not (project_root / "Config" / FILE_NAME).exists()
    assert "rescan_assets" not in notifier.calls


def test_partial_copy_is_removed_after_failed_move(services, preferences, monkeypatch, project_root):
    services.resolver.active()
    old_path = project_root / FILE_NAME
    destination = project_root / "Config" / FILE_NAME
    real_move = shutil.move
    attempts = []

    def copy_then_fail(src, dst):
        attempts.append(src)
        if len(attempts) == 1:
            shutil.copyfile(src, dst)
            raise OSError("device removed mid-copy")
        return real_move(src, dst)

    monkeypatch.setattr("pkgsource.storage.relocator.shutil.move", copy_then_fail)

    assert services.relocator.move("Config") is False
    assert not destination.exists()
    assert old_path.exists()
    assert preferences.get_string(DIRECTORY_PATH_KEY) == ""

    assert services.relocator.move("Config") is True
    assert destination.exists()
    assert not old_path.exists()


def test_move_to_current_directory_creates_missing_file(services, notifier, project_root):
    assert not (project_root / FILE_NAME).exists()

    assert services.relocator.move("") is True

    assert (project_root / FILE_NAME).exists()
    assert services.resolver.configuration.file_path == str(project_root / FILE_NAME)
    assert "rescan_assets" in notifier.calls
