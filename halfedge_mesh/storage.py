# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: 2026 The halfedge-mesh authors

class HandleArena:
    """
    Slot storage that addresses its items by stable integer handles.
    Removed slots are tombstoned (set to None) and put on a free list,
    from which later insertions take their handles.
    """

    def __init__(self, name):
        self.name = name
        self.slots = []
        self.free = []
        self.count = 0

    def add(self, item):
        assert item is not None
        if self.free:
            handle = self.free.pop()
            self.slots[handle] = item
        else:
            handle = len(self.slots)
            self.slots.append(item)
        self.count += 1
        return handle

    def remove(self, handle):
        assert self.get(handle) is not None, f"{self.name}: dangling handle {handle}"
        self.slots[handle] = None
        self.free.append(handle)
        self.count -= 1

    def get(self, handle, default=None):
        if (handle is None) or (handle < 0) or (handle >= len(self.slots)): return default
        item = self.slots[handle]
        return (default if item is None else item)

    def clear(self):
        self.slots.clear()
        self.free.clear()
        self.count = 0

    def items(self):
        for handle, item in enumerate(self.slots):
            if item is not None: yield handle, item

    def __getitem__(self, handle):
        item = self.get(handle)
        assert item is not None, f"{self.name}: dangling handle {handle}"
        return item

    def __contains__(self, handle):
        return self.get(handle) is not None

    def __iter__(self):
        for handle, item in enumerate(self.slots):
            if item is not None: yield handle

    def __len__(self):
        return self.count
