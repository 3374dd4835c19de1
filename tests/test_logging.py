"""Tests for build log rotation."""

from build_dmg.utils.logging import BuildLogger, get_log_path, rotate_logs


class TestRotateLogs:
    def test_shifts_existing_logs(self, tmp_path):
        current = get_log_path(tmp_path)
        current.parent.mkdir(parents=True)
        current.write_text("run 2")
        get_log_path(tmp_path, 1).write_text("run 1")

        rotate_logs(tmp_path, max_logs=5)

        assert not current.exists()
        assert get_log_path(tmp_path, 1).read_text() == "run 2"
        assert get_log_path(tmp_path, 2).read_text() == "run 1"

    def test_drops_oldest(self, tmp_path):
        get_log_path(tmp_path).parent.mkdir(parents=True)
        for i in range(3):
            get_log_path(tmp_path, i).write_text(f"log {i}")

        rotate_logs(tmp_path, max_logs=3)

        assert get_log_path(tmp_path, 1).read_text() == "log 0"
        assert get_log_path(tmp_path, 2).read_text() == "log 1"
        assert not get_log_path(tmp_path, 3).exists()


class TestBuildLogger:
    def test_ansi_stripped_in_file(self, tmp_path):
        with BuildLogger(tmp_path) as logger:
            logger.write("\033[32m✓ DMG created\033[0m\n")
            logger.write_line("done")

        assert get_log_path(tmp_path).read_text(encoding="utf-8") == "✓ DMG created\ndone\n"
        assert logger.buffer[0].startswith("\033[32m")
