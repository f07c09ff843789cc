"""ctypes bindings for admin detection and ``runas`` process spawning.

Only the functions in this module touch ``ctypes.WinDLL``; they are called
on Windows only and patched out in tests.
"""

from __future__ import annotations

import ctypes

SEE_MASK_NOCLOSEPROCESS = 0x00000040
SEE_MASK_NOASYNC = 0x00000100
SW_HIDE = 0

INFINITE = 0xFFFFFFFF
WAIT_OBJECT_0 = 0x00000000
WAIT_TIMEOUT = 0x00000102


class SHELLEXECUTEINFOW(ctypes.Structure):
    _fields_ = [  # noqa: RUF012
        ("cbSize", ctypes.c_ulong),
        ("fMask", ctypes.c_ulong),
        ("hwnd", ctypes.c_void_p),
        ("lpVerb", ctypes.c_wchar_p),
        ("lpFile", ctypes.c_wchar_p),
        ("lpParameters", ctypes.c_wchar_p),
        ("lpDirectory", ctypes.c_wchar_p),
        ("nShow", ctypes.c_int),
        ("hInstApp", ctypes.c_void_p),
        ("lpIDList", ctypes.c_void_p),
        ("lpClass", ctypes.c_wchar_p),
        ("hkeyClass", ctypes.c_void_p),
        ("dwHotKey", ctypes.c_ulong),
        ("hIconOrMonitor", ctypes.c_void_p),
        ("hProcess", ctypes.c_void_p),
    ]


def _shell32() -> ctypes.WinDLL:  # type: ignore[name-defined]
    return ctypes.WinDLL("shell32", use_last_error=True)  # type: ignore[attr-defined]


def _kernel32() -> ctypes.WinDLL:  # type: ignore[name-defined]
    return ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]


def _last_error() -> OSError:
    return ctypes.WinError(ctypes.get_last_error())  # type: ignore[attr-defined]


def is_user_admin() -> bool:
    """True if the current process token belongs to the Administrators group."""
    return bool(_shell32().IsUserAnAdmin())


def shell_execute_runas(file: str, parameters: str, directory: str | None = None) -> int:
    """Start *file* with the ``runas`` verb and return the process handle.

    Raises OSError when the request is rejected, including the operator
    cancelling the UAC dialog (``ERROR_CANCELLED``).
    """
    info = SHELLEXECUTEINFOW()
    info.cbSize = ctypes.sizeof(info)
    info.fMask = SEE_MASK_NOCLOSEPROCESS | SEE_MASK_NOASYNC
    info.lpVerb = "runas"
    info.lpFile = file
    info.lpParameters = parameters
    info.lpDirectory = directory
    info.nShow = SW_HIDE

    if not _shell32().ShellExecuteExW(ctypes.byref(info)):
        raise _last_error()
    if not info.hProcess:
        msg = f"No process handle returned for {file}"
        raise OSError(msg)
    return int(info.hProcess)


def wait_for_process(handle: int, timeout: float | None = None) -> bool:
    """Block until the process exits. False if *timeout* elapsed first."""
    millis = INFINITE if timeout is None else max(0, int(timeout * 1000))
    kernel32 = _kernel32()
    kernel32.WaitForSingleObject.argtypes = [ctypes.c_void_p, ctypes.c_ulong]
    kernel32.WaitForSingleObject.restype = ctypes.c_ulong
    result = kernel32.WaitForSingleObject(handle, millis)
    if result == WAIT_OBJECT_0:
        return True
    if result == WAIT_TIMEOUT:
        return False
    raise _last_error()


def get_exit_code(handle: int) -> int:
    code = ctypes.c_ulong()
    kernel32 = _kernel32()
    kernel32.GetExitCodeProcess.argtypes = [ctypes.c_void_p, ctypes.POINTER(ctypes.c_ulong)]
    if not kernel32.GetExitCodeProcess(handle, ctypes.byref(code)):
        raise _last_error()
    return int(code.value)


def close_handle(handle: int) -> None:
    kernel32 = _kernel32()
    kernel32.CloseHandle.argtypes = [ctypes.c_void_p]
    kernel32.CloseHandle(handle)
