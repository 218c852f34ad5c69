import io
import os
import tempfile
import unittest
from unittest import mock

from debar import ar_ls
from debar.ar_reader import AR_MAGIC, ArReader
from debar.ar_test_lib import make_archive, make_header

DEB = make_archive([
    ("debian-binary", b"2.0\n"),
    ("control.tar.gz", b"control"),
    ("data.tar.xz", b"data"),
])


class FakeStdout(io.TextIOWrapper):

    def __init__(self):
        super().__init__(io.BytesIO(), encoding="utf-8")

    def getvalue(self) -> bytes:
        self.flush()
        return self.buffer.getvalue()


class ArLsTest(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, name, data):
        path = os.path.join(self.tmp.name, name)
        with open(path, "wb") as f:
            f.write(data)
        return path

    def run_main(self, argv):
        stdout = FakeStdout()
        stderr = io.StringIO()
        with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr):
            status = ar_ls.main(argv)
        return status, stdout.getvalue(), stderr.getvalue()

    def test_format_mode(self):
        self.assertEqual(ar_ls.format_mode("100644"), "rw-r--r--")
        self.assertEqual(ar_ls.format_mode("755"), "rwxr-xr-x")
        self.assertEqual(ar_ls.format_mode("bogus"), "bogus")
        self.assertEqual(ar_ls.format_mode(""), "")
        self.assertEqual(ar_ls.format_mode("-1"), "-1")
        self.assertEqual(ar_ls.format_mode("0o644"), "0o644")

    def test_format_member_verbose_negative_mode(self):
        data = AR_MAGIC + make_header("a/", 2, mode="-1") + b"xy"
        member = ArReader(data).next()
        self.assertTrue(ar_ls.format_member(member, verbose=True).startswith("-1 0/0 "))

    def test_format_member_verbose(self):
        data = AR_MAGIC + make_header("a/", 2, timestamp=0, owner_id=1000,
                                      group_id=100, mode="100600") + b"xy"
        member = ArReader(data).next()
        self.assertEqual(ar_ls.format_member(member), "a")
        self.assertEqual(
            ar_ls.format_member(member, verbose=True),
            "rw------- 1000/100          2 1970-01-01 00:00 a")

    def test_list(self):
        status, out, err = self.run_main([self.write("p.deb", DEB)])
        self.assertEqual(status, 0)
        self.assertEqual(out, b"debian-binary\ncontrol.tar.gz\ndata.tar.xz\n")
        self.assertEqual(err, "")

    def test_print_members(self):
        path = self.write("p.deb", DEB)
        status, out, err = self.run_main([path, "-p", "data.tar.xz", "-p", "debian-binary"])
        self.assertEqual(status, 0)
        # Archive order, not command line order.
        self.assertEqual(out, b"2.0\ndata")

    def test_print_missing_member(self):
        path = self.write("p.deb", DEB)
        status, out, err = self.run_main([path, "--print", "nope"])
        self.assertEqual(status, 1)
        self.assertEqual(out, b"")
        self.assertIn("nope: member not found", err)

    def test_not_an_archive(self):
        path = self.write("p.txt", b"just some text\n")
        status, out, err = self.run_main([path])
        self.assertEqual(status, 1)
        self.assertIn("not an ar archive", err)

    def test_corrupt_archive(self):
        path = self.write("p.deb", DEB[:100])
        status, out, err = self.run_main([path])
        self.assertEqual(status, 1)
        self.assertEqual(out, b"debian-binary\n")
        self.assertIn("short read", err)

    def test_missing_file(self):
        status, out, err = self.run_main([os.path.join(self.tmp.name, "missing.deb")])
        self.assertEqual(status, 1)
        self.assertIn("cannot open", err)

    def test_stdin(self):
        stdin = io.TextIOWrapper(io.BytesIO(DEB))
        with mock.patch("sys.stdin", stdin):
            status, out, err = self.run_main(["-"])
        self.assertEqual(status, 0)
        self.assertEqual(out.splitlines()[0], b"debian-binary")


if __name__ == "__main__":
    unittest.main()
