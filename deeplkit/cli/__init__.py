"""Ready-made commands for translating text and managing glossaries."""