# Example config for the preparation of wire images (n-nbar vs. background)

GLOBAL_PARAM = {
    # ------------------------------------------------------------
    # Signal selection
    # ------------------------------------------------------------
    'wire_module_label': 'caldata',   # group of the wire signals in the input files
    'max_tick': 4492,                 # ticks used to score the APAs
    'adc_cut': 10,                    # ROI threshold in ADC
    'event_type': 0,                  # tag of all records, e.g. 0 = background, 1 = signal

    # ------------------------------------------------------------
    # Image
    # ------------------------------------------------------------
    'compression_mode': 'sum',        # options: 'sum', 'average', 'max'

    # ------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------
    'DIRS': {
        'input_files': ['path/to/wires.h5'],
        'output_dir': 'output/path',
    },

    # ------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------
    'SAVE': {
        'replace_files': True,
        'compression': 'gzip',
    },

    'log_level': 'info',
}
